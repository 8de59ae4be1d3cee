# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

from collections import namedtuple
from enum import Enum

from twinbank.constants import (
    BIOS_MIB, BOOT_SCALE_FACTOR, DATA_MIB, EFI_MIB, GPT_FOOTPRINT_MIB, GPT_MIB,
    HASH_SCALE_FACTOR, MIB_PER_GIB, PRIVATE_SCALE_FACTOR, RESERVE_SCALE_FACTOR,
    ROOT_SCALE_FACTOR)
from twinbank.errors    import ArithmeticRangeError, ConfigurationError

BANKS = ["A", "B"]
BANK_KINDS = ["EFI", "BOOT", "ROOT", "HASH", "RESERVED"]

class PartitionKey(Enum):
    BIOS       = "BIOS"
    EFI_A      = "EFI-A"
    EFI_B      = "EFI-B"
    BOOT_A     = "BOOT-A"
    BOOT_B     = "BOOT-B"
    ROOT_A     = "ROOT-A"
    ROOT_B     = "ROOT-B"
    HASH_A     = "HASH-A"
    HASH_B     = "HASH-B"
    RESERVED_A = "RESERVED-A"
    RESERVED_B = "RESERVED-B"
    PRIVATE    = "PRIVATE"
    DATA_A     = "DATA-A"
    DATA_B     = "DATA-B"

    @classmethod
    def of(cls, kind, bank):
        return cls("%s-%s" % (kind, bank))

    @property
    def kind(self):
        if self.bank is None:
            return self.value
        return self.value[:-2]

    @property
    def bank(self):
        if self.value[-2:] in ("-A", "-B"):
            return self.value[-1]
        return None

class PartitionPlan(Enum):
    SPLIT   = "split"
    UNIFIED = "unified"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError("'%s' is not a supported partition plan!" % value)

class UpdateMode(Enum):
    IN_PLACE    = "yes"
    SINGLE_BANK = "no"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        # YAML reads a bare yes/no as a boolean
        if value is True:
            value = "yes"
        elif value is False:
            value = "no"
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError("'%s' is not a supported update mode!" % value)

class Disk(Enum):
    OS   = "os"
    DATA = "data"

class ImageGeometry(namedtuple("ImageGeometry", ["os_image_gib", "data_image_gib"])):
    "Requested image sizes, in GiB"

    def __new__(cls, os_image_gib, data_image_gib=0):
        for name, value in (("os-size", os_image_gib), ("data-size", data_image_gib)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError("'%s' is not a valid %s (expected a number of GiB)!" % (value, name))
        return super().__new__(cls, os_image_gib, data_image_gib)

class Placement(namedtuple("Placement", ["key", "disk", "offset", "size"])):
    "Offset and size of a partition, in MiB"

    @property
    def end(self):
        return self.offset + self.size

def required_keys(plan, update):
    """Return the partitions that exist for the given plan and update mode,
    in placement order."""
    plan = PartitionPlan.parse(plan)
    update = UpdateMode.parse(update)
    banks = BANKS if update is UpdateMode.IN_PLACE else BANKS[:1]
    keys = [PartitionKey.BIOS]
    for bank in banks:
        keys.extend([PartitionKey.of(kind, bank) for kind in BANK_KINDS])
    keys.extend([PartitionKey.PRIVATE, PartitionKey.DATA_A])
    if plan is PartitionPlan.SPLIT:
        keys.append(PartitionKey.DATA_B)
    return keys

class PartitionLayout:
    """Read-only mapping of PartitionKey to Placement.

    Iteration follows placement order: the OS disk first, by ascending
    offset, then the data disk."""

    def __init__(self, placements):
        order = [Disk.OS, Disk.DATA]
        self._placements = tuple(sorted(placements, key=lambda p: (order.index(p.disk), p.offset)))
        self._by_key = {}
        for p in self._placements:
            if p.key in self._by_key:
                raise ValueError("partition '%s' placed twice!" % p.key.value)
            self._by_key[p.key] = p

    def __getitem__(self, key):
        return self._by_key[key]

    def __contains__(self, key):
        return key in self._by_key

    def __iter__(self):
        return iter([p.key for p in self._placements])

    def __len__(self):
        return len(self._placements)

    def __eq__(self, other):
        if not isinstance(other, PartitionLayout):
            return NotImplemented
        return self._by_key == other._by_key

    def __repr__(self):
        return "PartitionLayout(%s)" % ", ".join(
            "%s@%d+%d" % (p.key.value, p.offset, p.size) for p in self._placements)

    def keys(self):
        return list(self)

    def values(self):
        return list(self._placements)

    def items(self):
        return [(p.key, p) for p in self._placements]

    def on_disk(self, disk):
        return [p for p in self._placements if p.disk is disk]

    def disk_size_mib(self, disk):
        "Smallest image holding all partitions of the disk and its backup GPT"
        parts = self.on_disk(disk)
        if not parts:
            return 0
        return parts[-1].end + GPT_MIB

class SizeCalculator:
    def __init__(self, geometry, plan, update):
        self.geometry = geometry
        self.plan = PartitionPlan.parse(plan)
        self.update = UpdateMode.parse(update)

    def _bank_sizes(self, factor):
        os_gib = self.geometry.os_image_gib
        return [
            ("EFI",      EFI_MIB * factor),
            ("BOOT",     os_gib * BOOT_SCALE_FACTOR * factor),
            ("ROOT",     os_gib * ROOT_SCALE_FACTOR * factor),
            ("HASH",     os_gib * HASH_SCALE_FACTOR * factor),
            ("RESERVED", (os_gib * RESERVE_SCALE_FACTOR - EFI_MIB) * factor),
        ]

    def _place(self, placements, key, disk, offset, size):
        if size <= 0:
            raise ArithmeticRangeError(
                "computed size of partition '%s' is %d MiB (os-size=%dGiB, data-size=%dGiB)!"
                % (key.value, size, self.geometry.os_image_gib, self.geometry.data_image_gib))
        placements.append(Placement(key, disk, offset, size))
        return offset + size

    def compute(self):
        geometry = self.geometry
        placements = []

        # The first MiB holds the protective MBR and the primary GPT
        offset = GPT_MIB
        offset = self._place(placements, PartitionKey.BIOS, Disk.OS, offset, BIOS_MIB)

        if self.update is UpdateMode.IN_PLACE:
            banks, factor = BANKS, 1
        else:
            banks, factor = BANKS[:1], 2
        for bank in banks:
            for kind, size in self._bank_sizes(factor):
                key = PartitionKey.of(kind, bank)
                offset = self._place(placements, key, Disk.OS, offset, size)

        private = geometry.os_image_gib * PRIVATE_SCALE_FACTOR - (GPT_FOOTPRINT_MIB + BIOS_MIB) - DATA_MIB
        offset = self._place(placements, PartitionKey.PRIVATE, Disk.OS, offset, private)

        if self.plan is PartitionPlan.SPLIT:
            self._place(placements, PartitionKey.DATA_A, Disk.OS, offset, DATA_MIB)
            self._place(placements, PartitionKey.DATA_B, Disk.DATA, GPT_MIB,
                geometry.data_image_gib * MIB_PER_GIB - GPT_FOOTPRINT_MIB)
        else:
            self._place(placements, PartitionKey.DATA_A, Disk.OS, offset,
                geometry.data_image_gib * MIB_PER_GIB)

        return PartitionLayout(placements)

def compute_layout(geometry, plan, update):
    return SizeCalculator(geometry, plan, update).compute()
