# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

from twinbank.cmd   import ImageCmd
from twinbank.table import PartitionTable

class PlanCmd(ImageCmd):
    def __init__(self):
        super().__init__()
        self.options["script"] = False
        self.options["write"] = False

    def usage(self):
        print(PLAN_USAGE)

    def option(self, o, a):
        if o in ("-s", "--script"):
            self.options["script"] = True
        elif o in ("-w", "--write"):
            self.options["write"] = True
        else:
            return False
        return True

    def parse_options(self, argv, short="", long=[]):
        return super().parse_options(argv, short + "sw", long + ["script", "write"])

    def run(self, settings):
        table = PartitionTable.plan(settings.geometry, settings.plan, settings.update)
        if self.options["script"]:
            print(table.script(settings.images), end="")
        elif self.options["write"]:
            table.write(settings.images)
            print("Done.")
        else:
            table.print_table()
        return 0

PLAN_USAGE = """usage: twinbank plan [options] [spec.yml...]

Compute the partition layout of the OS image (and data image for the 'split'
plan) and print it.

options:
  -h, --help              show this help
  -v, --verbose           print commands of external tools
  -s, --script            print a shell script creating the partition tables
  -w, --write             create the partition tables in the images
  --os-size=GIB           size of the OS image
  --data-size=GIB         size of the data image
  --plan=split|unified    keep data on its own image or on the OS image
  --update=yes|no         two OS banks for in-place updates, or a single one
  --image=FILE            OS image file
  --data-image=FILE       data image file"""
