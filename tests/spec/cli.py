#!/usr/bin/env python3

import avocado
import io
import os
import sys

from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

path_to_self    = os.path.realpath(__file__)
path_to_sources = os.path.join(os.path.dirname(path_to_self), "..", "..")
sys.path.append(path_to_sources)

from twinbank.check  import CheckCmd
from twinbank.layout import Disk, ImageGeometry
from twinbank.plan   import PlanCmd
from twinbank.table  import PartitionTable
from twinbank.utils  import GptTool

def run(cmd, argv):
    out = io.StringIO()
    err = io.StringIO()
    code = None
    with redirect_stdout(out), redirect_stderr(err):
        try:
            cmd.main(argv)
        except SystemExit as e:
            code = e.code
    return code, out.getvalue(), err.getvalue()

class PlanPrintsTable(avocado.Test):
    def test(self):
        code, out, err = run(PlanCmd(), ["--os-size=1", "--data-size=20", "--plan=split", "--update=yes"])
        self.assertEqual(code, 0)
        self.assertIn("BOOT-B", out)
        self.assertIn("os disk\t1024M", out)
        self.assertIn("data disk\t20480M", out)

class PlanPrintsScript(avocado.Test):
    def test(self):
        code, out, err = run(PlanCmd(), ["-s", "--plan=unified", "--update=no", "--image=a.img"])
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("#!/bin/bash\n"))
        self.assertIn(" a.img\n", out)
        self.assertNotIn("data.img", out)

class PlanRejectsUnknownPlan(avocado.Test):
    def test(self):
        code, out, err = run(PlanCmd(), ["--plan=mirrored"])
        self.assertEqual(code, 3)
        self.assertIn("'mirrored'", err)
        self.assertEqual(out, "")

class PlanRejectsTinyImage(avocado.Test):
    def test(self):
        code, out, err = run(PlanCmd(), ["--os-size=0"])
        self.assertEqual(code, 3)
        self.assertEqual(out, "")

class PlanMissingSpecFile(avocado.Test):
    def test(self):
        code, out, err = run(PlanCmd(), ["does-not-exist.yml"])
        self.assertEqual(code, 2)

class PlanUnknownOption(avocado.Test):
    def test(self):
        code, out, err = run(PlanCmd(), ["--frobnicate"])
        self.assertEqual(code, 1)

class CheckMatchingImages(avocado.Test):
    def test(self):
        table = PartitionTable.plan(ImageGeometry(1, 4), "split", "yes")
        tables = {
            "os.img": self._sfdisk(table, Disk.OS),
            "data.img": self._sfdisk(table, Disk.DATA),
        }
        with mock.patch.object(GptTool, "sfdisk_json", side_effect=lambda image: tables[image]):
            code, out, err = run(CheckCmd(), ["--os-size=1", "--data-size=4"])
        self.assertEqual(code, 0)
        self.assertIn("Layout matches", out)

        with mock.patch.object(GptTool, "sfdisk_json", side_effect=lambda image: tables[image]):
            code, out, err = run(CheckCmd(), ["--os-size=2", "--data-size=4"])
        self.assertEqual(code, 5)
        self.assertIn("ROOT-A", err)

    def _sfdisk(self, table, disk):
        partitions = []
        for inst in table.instructions:
            if inst.disk is disk:
                partitions.append({
                    "start": inst.start * 2048,
                    "size": inst.end_sector + 1 - inst.start * 2048,
                    "uuid": inst.guid,
                    "name": inst.label,
                })
        return {"partitiontable": {"label": "gpt", "partitions": partitions}}

class CheckMalformedTable(avocado.Test):
    def test(self):
        tables = {"os.img": {"partitiontable": {"label": "gpt", "partitions": None}}}
        with mock.patch.object(GptTool, "sfdisk_json", side_effect=lambda image: tables[image]):
            code, out, err = run(CheckCmd(), ["--plan=unified"])
        self.assertEqual(code, 5)
        self.assertIn("shall be a list", err)
