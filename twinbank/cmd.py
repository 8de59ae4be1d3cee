# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

from abc import ABC, abstractmethod

import getopt
import subprocess
import sys

from twinbank.errors import ConfigurationError, ArithmeticRangeError, IntrospectionParseError, LayoutMismatchError
from twinbank.spec   import ImageSpec
from twinbank.utils  import GptTool

class Cmd(ABC):
    def __init__(self):
        super().__init__()

    @abstractmethod
    def main(self, argv):
        pass

class ImageCmd(Cmd):
    """Command acting on the images described by YAML files and command-line
    options."""

    SHORT_OPTIONS = "hv"
    LONG_OPTIONS = ["help", "verbose",
        "os-size=", "data-size=", "plan=", "update=", "image=", "data-image="]
    SETTINGS = {
        "--os-size":    "os-size",
        "--data-size":  "data-size",
        "--plan":       "plan",
        "--update":     "update",
        "--image":      "filename",
        "--data-image": "data-filename",
    }

    def __init__(self):
        self.options = { "verbose": False }
        self.spec = ImageSpec()
        super().__init__()

    @abstractmethod
    def usage(self):
        pass

    @abstractmethod
    def option(self, o, a):
        "Handle a command-specific option, return False if unknown"
        pass

    @abstractmethod
    def run(self, settings):
        pass

    def parse_options(self, argv, short="", long=[]):
        try:
            opts, args = getopt.getopt(argv, self.SHORT_OPTIONS + short, self.LONG_OPTIONS + long)
        except getopt.GetoptError as err:
            print(err)
            self.usage()
            sys.exit(1)
        for o, a in opts:
            if o in ("-h", "--help"):
                self.usage()
                sys.exit()
            elif o in ("-v", "--verbose"):
                self.options["verbose"] = True
                GptTool.verbose = True
            elif o in self.SETTINGS:
                self.spec.set(self.SETTINGS[o], a)
            elif self.option(o, a) is False:
                assert False, "unhandled option"
        return args

    def main(self, argv):
        args = self.parse_options(argv)
        try:
            for spec in args:
                self.spec.load(spec)
            settings = self.spec.parse()
            sys.exit(self.run(settings))
        except OSError as e:
            sys.stderr.write("error: {0}\n".format(e))
            sys.exit(2)
        except (ConfigurationError, ArithmeticRangeError) as e:
            sys.stderr.write("error: invalid image settings: {0}\n".format(e))
            sys.exit(3)
        except subprocess.CalledProcessError as e:
            sys.stderr.write("error: partitioning tool failed: {0}\n".format(e))
            sys.exit(4)
        except (IntrospectionParseError, LayoutMismatchError) as e:
            sys.stderr.write("error: {0}\n".format(e))
            sys.exit(5)
