# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

import json
import os
import shutil
import subprocess

from twinbank.errors import IntrospectionParseError

class GptTool:
    """External tools owning the disk images: sgdisk writes partition tables
    and sfdisk reads them back."""

    verbose = False

    @staticmethod
    def _cmd(tool, args):
        GptTool.check_tool(tool)
        cmd = [tool, *args]
        if GptTool.verbose is True:
            print(" ".join(cmd))
        return cmd

    @staticmethod
    def check_tool(tool):
        if shutil.which(tool) is None:
            raise FileNotFoundError("please make sure that '%s' is installed!" % tool)

    @staticmethod
    def check_image(image):
        "Raise OSError if the image can neither be opened nor created for writing"
        if os.path.exists(image):
            if not os.path.isfile(image) or not os.access(image, os.W_OK):
                raise PermissionError("'%s' is not a writable image file!" % image)
        else:
            directory = os.path.dirname(image) or "."
            if not os.path.isdir(directory):
                raise FileNotFoundError("directory of image '%s' does not exist!" % image)
            if not os.access(directory, os.W_OK):
                raise PermissionError("image '%s' cannot be created!" % image)

    @staticmethod
    def sgdisk(args, image):
        cmd = GptTool._cmd("sgdisk", [*args, image])
        return subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL)

    @staticmethod
    def sfdisk_json(image):
        cmd = GptTool._cmd("sfdisk", ["--json", image])
        output = subprocess.check_output(cmd)
        try:
            return json.loads(output)
        except ValueError as e:
            raise IntrospectionParseError("could not decode the partition table of '%s': %s" % (image, e))

    @staticmethod
    def grow(image, size_mib):
        "Extend the image file so it can hold size_mib MiB"
        size = size_mib * 1024 * 1024
        if not os.path.exists(image) or os.path.getsize(image) < size:
            with open(image, "ab") as f:
                f.truncate(size)
