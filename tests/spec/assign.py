#!/usr/bin/env python3

import avocado
import os
import sys

path_to_self    = os.path.realpath(__file__)
path_to_sources = os.path.join(os.path.dirname(path_to_self), "..", "..")
sys.path.append(path_to_sources)

from twinbank           import constants
from twinbank.assign    import LabelAssigner, TypeCodeAssigner, UUIDAssigner
from twinbank.layout    import PartitionKey as K, required_keys

class Labels(avocado.Test):
    def test(self):
        labels = LabelAssigner("split", "yes")
        self.assertEqual(labels[K.BIOS], "BIOS-BOOT")
        self.assertEqual(labels[K.EFI_A], "EFI-SYSTEM")
        self.assertEqual(labels[K.EFI_B], "EFI-BACKUP")
        self.assertEqual(labels[K.BOOT_A], "BOTTLEROCKET-BOOT-A")
        self.assertEqual(labels[K.ROOT_B], "BOTTLEROCKET-ROOT-B")
        self.assertEqual(labels[K.HASH_A], "BOTTLEROCKET-HASH-A")
        self.assertEqual(labels[K.RESERVED_B], "BOTTLEROCKET-RESERVED-B")
        self.assertEqual(labels[K.PRIVATE], "BOTTLEROCKET-PRIVATE")
        self.assertEqual(labels[K.DATA_A], "")
        self.assertEqual(labels[K.DATA_B], "")

class AssignersAreTotal(avocado.Test):
    def test(self):
        for plan in ("split", "unified"):
            for update in ("yes", "no"):
                keys = required_keys(plan, update)
                for assigner in (LabelAssigner, TypeCodeAssigner, UUIDAssigner):
                    values = assigner(plan, update)
                    self.assertEqual([key for key, value in values.items()], keys)

class MissingKeyIsAnError(avocado.Test):
    def test(self):
        labels = LabelAssigner("unified", "no")
        self.assertNotIn(K.BOOT_B, labels)
        with self.assertRaises(KeyError):
            labels[K.BOOT_B]
        with self.assertRaises(KeyError):
            UUIDAssigner("unified", "yes")[K.DATA_B]

class TypeCodes(avocado.Test):
    def test(self):
        types = TypeCodeAssigner("split", "yes")
        self.assertEqual(types[K.BIOS], "ef02")
        self.assertEqual(types[K.EFI_A], constants.EFI_SYSTEM_TYPECODE)
        self.assertEqual(types[K.EFI_B], constants.EFI_BACKUP_TYPECODE)
        self.assertEqual(types[K.BOOT_A], "6b636168-7420-6568-2070-6c616e657421")
        self.assertEqual(types[K.PRIVATE], "440408bb-eb0b-4328-a6e5-a29038fad706")
        for kind in ("BOOT", "ROOT", "HASH", "RESERVED"):
            self.assertEqual(types[K.of(kind, "A")], types[K.of(kind, "B")])
        self.assertEqual(types[K.DATA_A], types[K.DATA_B])
        self.assertEqual(len(set(types[K.of(kind, "A")]
            for kind in ("BOOT", "ROOT", "HASH", "RESERVED"))), 4)

class SplitDataGuids(avocado.Test):
    def test(self):
        uuids = UUIDAssigner("split", "yes")
        self.assertEqual(uuids[K.DATA_B], "5b94e8df-28b8-485c-9d19-362263b5944c")
        self.assertEqual(uuids[K.DATA_A], "69040874-417d-4e26-a764-7885f22007ea")

class UnifiedDataGuids(avocado.Test):
    def test(self):
        uuids = UUIDAssigner("unified", "no")
        self.assertEqual(uuids[K.DATA_A], constants.DATA_PREFERRED_PARTGUID)
        self.assertNotIn(K.DATA_B, uuids)

class OtherGuidsAreGenerated(avocado.Test):
    def test(self):
        uuids = UUIDAssigner("split", "yes")
        for key, guid in uuids.items():
            if key not in (K.DATA_A, K.DATA_B) and guid != constants.GENERATE_GUID:
                self.fail("%s has an explicit GUID: %s" % (key.value, guid))

class GuidLookup(avocado.Test):
    def test(self):
        uuids = UUIDAssigner("split", "yes")
        self.assertIs(uuids.key_for(constants.DATA_PREFERRED_PARTGUID.upper()), K.DATA_B)
        self.assertIs(uuids.key_for(constants.DATA_FALLBACK_PARTGUID), K.DATA_A)
        self.assertIsNone(uuids.key_for("00000000-0000-0000-0000-000000000000"))
