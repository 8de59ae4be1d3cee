# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0
