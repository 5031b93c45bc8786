"""SchoolDesk Backend.

School structure management API: classes, departments and sections with
their activation states.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
