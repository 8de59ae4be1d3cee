# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

import shlex

from collections import namedtuple

from twinbank.assign    import LabelAssigner, TypeCodeAssigner, UUIDAssigner
from twinbank.constants import GPTPRIO_PRIORITY_BIT, GPTPRIO_SUCCESSFUL_BIT, SECTORS_PER_MIB
from twinbank.layout    import Disk, PartitionKey, SizeCalculator
from twinbank.utils     import GptTool

# Bank A is the one the bootloader picks on first boot
BOOT_ATTRIBUTES = {
    PartitionKey.BOOT_A: (("set", GPTPRIO_PRIORITY_BIT), ("set", GPTPRIO_SUCCESSFUL_BIT)),
    PartitionKey.BOOT_B: (("clear", GPTPRIO_PRIORITY_BIT), ("clear", GPTPRIO_SUCCESSFUL_BIT)),
}

class Instruction(namedtuple("Instruction", [
        "disk", "number", "key", "start", "end_sector", "label", "typecode", "guid", "attributes"])):
    "Creation of one partition; start is in MiB, end_sector is inclusive"

    def sgdisk_args(self):
        n = self.number
        args = ["-n", "%d:%dM:%d" % (n, self.start, self.end_sector)]
        if self.label:
            args.extend(["-c", "%d:%s" % (n, self.label)])
        args.extend(["-t", "%d:%s" % (n, self.typecode)])
        args.extend(["-u", "%d:%s" % (n, self.guid)])
        for op, bit in self.attributes:
            args.extend(["-A", "%d:%s:%d" % (n, op, bit)])
        return args

class TableInstructionBuilder:
    def __init__(self, layout, labels, typecodes, uuids):
        self.layout = layout
        self.labels = labels
        self.typecodes = typecodes
        self.uuids = uuids

    def build(self):
        instructions = []
        for disk in Disk:
            for number, part in enumerate(self.layout.on_disk(disk), 1):
                key = part.key
                instructions.append(Instruction(
                    disk, number, key, part.offset,
                    (part.offset + part.size) * SECTORS_PER_MIB - 1,
                    self.labels[key], self.typecodes[key], self.uuids[key],
                    BOOT_ATTRIBUTES.get(key, ())))
        return tuple(instructions)

class PartitionTable:
    """Computed layout of an image together with the instructions creating it."""

    def __init__(self, layout, instructions):
        self.layout = layout
        self.instructions = instructions

    @classmethod
    def plan(cls, geometry, plan, update):
        layout = SizeCalculator(geometry, plan, update).compute()
        builder = TableInstructionBuilder(layout,
            LabelAssigner(plan, update),
            TypeCodeAssigner(plan, update),
            UUIDAssigner(plan, update))
        return cls(layout, builder.build())

    def disks(self):
        return [disk for disk in Disk if self.layout.on_disk(disk)]

    def sgdisk_args(self, disk):
        args = ["--clear"]
        for inst in self.instructions:
            if inst.disk is disk:
                args.extend(inst.sgdisk_args())
        return args

    def script(self, images):
        script = "#!/bin/bash\nset -e\n"
        for disk in self.disks():
            size = self.layout.disk_size_mib(disk)
            script = script + "truncate -s '>%dM' %s\n" % (size, shlex.quote(images[disk]))
            script = script + "sgdisk %s %s\n" % (" ".join(map(shlex.quote, self.sgdisk_args(disk))), shlex.quote(images[disk]))
        return script

    def write(self, images):
        """Create the partition tables in the images, the OS image first.

        Tools and images are checked before anything is written; a failure
        of sgdisk on the data image still leaves the OS image partitioned."""
        GptTool.check_tool("sgdisk")
        for disk in self.disks():
            GptTool.check_image(images[disk])
        for disk in self.disks():
            image = images[disk]
            print("Creating GPT partition table in %s..." % image)
            GptTool.grow(image, self.layout.disk_size_mib(disk))
            GptTool.sgdisk(self.sgdisk_args(disk), image)

    def print_table(self):
        print("disk\tnum\tpartition\tstart\tsize\tend\tlabel")
        for inst in self.instructions:
            part = self.layout[inst.key]
            print("%s\t%d\t%-10s\t%dM\t%dM\t%d\t%s" % (inst.disk.value, inst.number,
                inst.key.value, part.offset, part.size, inst.end_sector, inst.label or "-"))
        for disk in self.disks():
            print("%s disk\t%dM" % (disk.value, self.layout.disk_size_mib(disk)))
