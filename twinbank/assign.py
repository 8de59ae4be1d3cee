# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

from twinbank import constants
from twinbank.layout import PartitionKey, PartitionPlan, required_keys

CLASS_TYPECODES = {
    "BOOT":     constants.BOOT_TYPECODE,
    "ROOT":     constants.ROOT_TYPECODE,
    "HASH":     constants.HASH_TYPECODE,
    "RESERVED": constants.RESERVED_TYPECODE,
    "PRIVATE":  constants.PRIVATE_TYPECODE,
    "DATA":     constants.DATA_TYPECODE,
}

FIXED_LABELS = {
    PartitionKey.BIOS:    constants.BIOS_LABEL,
    PartitionKey.EFI_A:   constants.EFI_SYSTEM_LABEL,
    PartitionKey.EFI_B:   constants.EFI_BACKUP_LABEL,
    PartitionKey.PRIVATE: constants.PRIVATE_LABEL,
    # data partitions get their label when first mounted
    PartitionKey.DATA_A:  "",
    PartitionKey.DATA_B:  "",
}

FIXED_TYPECODES = {
    PartitionKey.BIOS:  constants.BIOS_BOOT_TYPECODE,
    PartitionKey.EFI_A: constants.EFI_SYSTEM_TYPECODE,
    PartitionKey.EFI_B: constants.EFI_BACKUP_TYPECODE,
}

def label_for(key):
    if key in FIXED_LABELS:
        return FIXED_LABELS[key]
    return constants.LABEL_PREFIX + key.value

def typecode_for(key):
    if key in FIXED_TYPECODES:
        return FIXED_TYPECODES[key]
    return CLASS_TYPECODES[key.kind]

def data_partguids(plan):
    "Return the explicit partition GUIDs of the data partitions for a plan"
    plan = PartitionPlan.parse(plan)
    if plan is PartitionPlan.SPLIT:
        return {
            PartitionKey.DATA_A: constants.DATA_FALLBACK_PARTGUID,
            PartitionKey.DATA_B: constants.DATA_PREFERRED_PARTGUID,
        }
    return {
        PartitionKey.DATA_A: constants.DATA_PREFERRED_PARTGUID,
    }

class Assigner:
    """Lookup of a per-partition value, total over the partitions of one
    (plan, update mode) configuration."""

    def __init__(self, plan, update):
        self.plan = PartitionPlan.parse(plan)
        self.keys = required_keys(plan, update)
        self._values = {key: self.value_for(key) for key in self.keys}

    def value_for(self, key):
        raise NotImplementedError()

    def __getitem__(self, key):
        # Asking for a partition this configuration does not have is a bug
        return self._values[key]

    def __contains__(self, key):
        return key in self._values

    def items(self):
        return [(key, self._values[key]) for key in self.keys]

class LabelAssigner(Assigner):
    def value_for(self, key):
        return label_for(key)

class TypeCodeAssigner(Assigner):
    def value_for(self, key):
        return typecode_for(key)

class UUIDAssigner(Assigner):
    """Partition GUIDs. Only the data partitions have fixed ones; all others
    are left for the partitioning tool to generate."""

    def value_for(self, key):
        return data_partguids(self.plan).get(key, constants.GENERATE_GUID)

    def key_for(self, guid):
        "Return the data partition a fixed partition GUID identifies, if any"
        for key, value in data_partguids(self.plan).items():
            if value.lower() == guid.lower():
                return key
        return None
