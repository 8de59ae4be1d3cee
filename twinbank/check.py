# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

from twinbank.cmd        import ImageCmd
from twinbank.introspect import LayoutIntrospector
from twinbank.layout     import Disk, PartitionPlan

class CheckCmd(ImageCmd):
    def __init__(self):
        super().__init__()
        self.options["verify"] = True

    def usage(self):
        print(CHECK_USAGE)

    def option(self, o, a):
        if o in ("-n", "--no-verify"):
            self.options["verify"] = False
            return True
        return False

    def parse_options(self, argv, short="", long=[]):
        return super().parse_options(argv, short + "n", long + ["no-verify"])

    def run(self, settings):
        introspector = LayoutIntrospector(settings.plan, settings.update)
        data_image = None
        if settings.plan is PartitionPlan.SPLIT:
            data_image = settings.images[Disk.DATA]
        layout = introspector.inspect(settings.images[Disk.OS], data_image)

        for key, part in layout.items():
            print("%s\t%-10s\t%dM\t%dM" % (part.disk.value, key.value, part.offset, part.size))

        if self.options["verify"]:
            geometry = settings.geometry
            introspector.verify(layout, geometry)
            print("Layout matches a %dGiB OS image (%s plan, update=%s)."
                % (geometry.os_image_gib, settings.plan.value, settings.update.value))
        return 0

CHECK_USAGE = """usage: twinbank check [options] [spec.yml...]

Read the partition tables of existing images and check that they match the
layout computed for the given settings.

options:
  -h, --help              show this help
  -v, --verbose           print commands of external tools
  -n, --no-verify         only print the partitions found
  --os-size=GIB           size of the OS image
  --data-size=GIB         size of the data image
  --plan=split|unified    keep data on its own image or on the OS image
  --update=yes|no         two OS banks for in-place updates, or a single one
  --image=FILE            OS image file
  --data-image=FILE       data image file"""
