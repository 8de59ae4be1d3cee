#!/usr/bin/python3
# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

import os
import sys

path_to_self    = os.path.realpath(__file__)
path_to_sources = os.path.dirname(path_to_self)
sys.path.append(path_to_sources)

from twinbank.cli import main

if __name__ == "__main__":
    main()
