#!/usr/bin/env python3
"""
crystory - Storage Device Identity Tool

Lists attached USB storage devices, matches every mounted volume with the USB
topology reported by the system, and gives each volume a persistent UUID
stored in a hidden marker file at the volume root.
"""

import sys

from crystory.crystory import main


if __name__ == "__main__":
    sys.exit(main())
