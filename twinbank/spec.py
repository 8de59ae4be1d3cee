# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

import os
import re
import yaml

from collections import namedtuple

from twinbank.errors import ConfigurationError
from twinbank.layout import Disk, ImageGeometry, PartitionPlan, UpdateMode

DEFAULTS = {
    "os-size":       2,
    "data-size":     20,
    "plan":          "split",
    "update":        "yes",
    "filename":      "os.img",
    "data-filename": "data.img",
}

ImageSettings = namedtuple("ImageSettings", ["geometry", "plan", "update", "images"])

def from_human_gib(value, setting):
    "Convert a size such as 2, '2', '2G' or '2GiB' to a number of GiB"
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        m = re.search(r'^\s*(\d+)\s*(g|gib|gb)?\s*$', value.lower())
        if m is not None:
            return int(m.groups()[0])
    raise ConfigurationError("'%s' is not a valid %s (expected a whole number of GiB)!" % (value, setting))

class ImageSpec:
    """Image settings read from one or more YAML files. Settings of a file
    override those of the files it requires and of the files loaded before
    it."""

    def __init__(self):
        self.spec = None
        self.overrides = {}

    def loads(self, yaml_spec):
        return self._load("<string>", yaml_spec)

    def load(self, yaml_file):
        with open(yaml_file, "r") as f:
            return self._load(yaml_file, f)

    def _load(self, yaml_filename, yaml_spec):
        try:
            spec = yaml.safe_load(yaml_spec)
        except yaml.YAMLError as e:
            raise ConfigurationError("%s: %s" % (yaml_filename, e))
        if spec is None:
            spec = {}
        if type(spec) != type({}):
            raise ConfigurationError("%s: specification shall be a dictionary!" % yaml_filename)

        if "requires" in spec:
            if type(spec["requires"]) != type([]):
                raise ConfigurationError("%s: 'requires' shall be a list of specifications!" % yaml_filename)
            for req in spec["requires"]:
                if not isinstance(req, str):
                    raise ConfigurationError("%s: '%s' is not a valid specification name!" % (yaml_filename, req))
                req_path = os.path.join(os.path.dirname(yaml_filename), req)
                req_yml = os.path.normpath("%s.yml" % req_path)
                req_yaml = os.path.normpath("%s.yaml" % req_path)
                if os.path.isfile(req_yml):
                    req_path = req_yml
                elif os.path.isfile(req_yaml):
                    req_path = req_yaml
                else:
                    raise FileNotFoundError("%s: '%s' could not be found in %s/!"
                        % (yaml_filename, req, os.path.dirname(req_path)))
                self.load(req_path)

        if self.spec is None:
            self.spec = {}
        self.merge(spec)
        return self.spec

    def merge(self, spec):
        if "image" in spec:
            if spec["image"] is None:
                raise ConfigurationError("empty 'image' definition!")
            if type(spec["image"]) != type({}):
                raise ConfigurationError("'image' shall be a dictionary of settings!")
            if "image" not in self.spec:
                self.spec["image"] = {}
            for setting in spec["image"]:
                self.spec["image"][setting] = spec["image"][setting]
        return self.spec

    def set(self, setting, value):
        "Override a setting from the command line"
        self.overrides[setting] = value

    def parse(self):
        settings = dict(DEFAULTS)
        if self.spec is not None:
            if "image" not in self.spec:
                raise ConfigurationError("'image' not found in provided specification!")
            settings.update(self.spec["image"])
        settings.update(self.overrides)

        for setting in settings:
            if setting not in DEFAULTS:
                raise ConfigurationError("'%s' is not a supported image setting!" % setting)

        geometry = ImageGeometry(
            from_human_gib(settings["os-size"], "os-size"),
            from_human_gib(settings["data-size"], "data-size"))
        images = {
            Disk.OS:   settings["filename"],
            Disk.DATA: settings["data-filename"],
        }
        return ImageSettings(geometry,
            PartitionPlan.parse(settings["plan"]),
            UpdateMode.parse(settings["update"]),
            images)
