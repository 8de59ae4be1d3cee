# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

from twinbank.assign    import UUIDAssigner
from twinbank.constants import BIOS_LABEL, EFI_BACKUP_LABEL, EFI_SYSTEM_LABEL, LABEL_PREFIX, SECTOR_SIZE
from twinbank.errors    import IntrospectionParseError, LayoutMismatchError
from twinbank.layout    import (Disk, PartitionKey, PartitionLayout, PartitionPlan, Placement,
                                SizeCalculator, UpdateMode, required_keys)
from twinbank.utils     import GptTool

SPECIAL_LABELS = {
    BIOS_LABEL:       PartitionKey.BIOS,
    EFI_SYSTEM_LABEL: PartitionKey.EFI_A,
    EFI_BACKUP_LABEL: PartitionKey.EFI_B,
}

class LayoutIntrospector:
    """Recover the layout of images that were already built.

    Partitions are identified by their GPT name; the data partitions carry
    none and are found from their fixed partition GUID instead."""

    def __init__(self, plan, update):
        self.plan = PartitionPlan.parse(plan)
        self.update = UpdateMode.parse(update)
        self.required = required_keys(self.plan, self.update)
        self.uuids = UUIDAssigner(self.plan, self.update)

    def _key_for(self, entry):
        name = entry.get("name") or ""
        guid = entry.get("uuid") or ""
        if not isinstance(name, str) or not isinstance(guid, str):
            raise IntrospectionParseError("partition '%s' has an invalid name or uuid!"
                % entry.get("node", "?"))
        if name in SPECIAL_LABELS:
            return SPECIAL_LABELS[name]
        if name.startswith(LABEL_PREFIX):
            try:
                return PartitionKey(name[len(LABEL_PREFIX):])
            except ValueError:
                return None
        if name == "" and guid:
            return self.uuids.key_for(guid)
        return None

    def _to_mib(self, entry, field, sectors_per_mib):
        value = entry.get(field)
        if isinstance(value, bool) or not isinstance(value, int):
            raise IntrospectionParseError("partition '%s' has an invalid %s: %s!"
                % (entry.get("node", "?"), field, value))
        if value % sectors_per_mib != 0:
            raise IntrospectionParseError("%s of partition '%s' (sector %d) is not MiB aligned!"
                % (field, entry.get("node", "?"), value))
        return value // sectors_per_mib

    def parse(self, table, disk):
        """Return the placements found in a partition table, as reported by
        'sfdisk --json'."""
        try:
            table = table["partitiontable"]
            entries = table.get("partitions", [])
            sector_size = table.get("sectorsize", SECTOR_SIZE)
        except (AttributeError, KeyError, TypeError):
            raise IntrospectionParseError("no partition table found on the %s disk!" % disk.value)
        if table.get("label", "gpt") != "gpt":
            raise IntrospectionParseError("%s disk does not have a GPT partition table!" % disk.value)
        if type(entries) != type([]):
            raise IntrospectionParseError("partitions of the %s disk shall be a list!" % disk.value)
        if isinstance(sector_size, bool) or not isinstance(sector_size, int) \
                or sector_size <= 0 or (1024 * 1024) % sector_size != 0:
            raise IntrospectionParseError("%s disk has an invalid sector size: %s!" % (disk.value, sector_size))
        sectors_per_mib = 1024 * 1024 // sector_size

        placements = []
        for index, entry in enumerate(entries, 1):
            if type(entry) != type({}):
                raise IntrospectionParseError("partition #%d of the %s disk is not a dictionary!"
                    % (index, disk.value))
            key = self._key_for(entry)
            if key is None:
                continue
            placements.append(Placement(key, disk,
                self._to_mib(entry, "start", sectors_per_mib),
                self._to_mib(entry, "size", sectors_per_mib)))
        return placements

    def recover(self, os_table, data_table=None):
        placements = self.parse(os_table, Disk.OS)
        if data_table is not None:
            placements.extend(self.parse(data_table, Disk.DATA))

        found = [p.key for p in placements]
        for key in set(found):
            if found.count(key) > 1:
                raise IntrospectionParseError("partition '%s' was found more than once!" % key.value)
        missing = [key.value for key in self.required if key not in found]
        if missing:
            raise IntrospectionParseError("required partition(s) not found: %s!" % ", ".join(missing))
        return PartitionLayout(placements)

    def inspect(self, os_image, data_image=None):
        os_table = GptTool.sfdisk_json(os_image)
        data_table = None
        if data_image is not None:
            data_table = GptTool.sfdisk_json(data_image)
        return self.recover(os_table, data_table)

    def verify(self, layout, geometry):
        """Check that a recovered layout is the one computed for the given
        geometry, raise LayoutMismatchError otherwise."""
        expected = SizeCalculator(geometry, self.plan, self.update).compute()
        keys = [key for key in PartitionKey if key in layout or key in expected]
        differs = []
        details = []
        for key in keys:
            want = expected[key] if key in expected else None
            got = layout[key] if key in layout else None
            if want == got:
                continue
            differs.append(key)
            details.append("%s: expected %s, found %s" % (key.value, _describe(want), _describe(got)))
        if differs:
            raise LayoutMismatchError(differs, "layout differs from a %dGiB/%dGiB image: %s"
                % (geometry.os_image_gib, geometry.data_image_gib, "; ".join(details)))
        return expected

def _describe(placement):
    if placement is None:
        return "nothing"
    return "%dM+%dM on %s disk" % (placement.offset, placement.size, placement.disk.value)
