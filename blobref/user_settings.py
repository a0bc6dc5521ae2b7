# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  user_settings.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Provides methods to parse environment variables (`get_env`) and RCfiles
  (`get_rc`) and to override default settings (`set_settings`) defined in the
  `blobref.settings` module.

  Check out the respective docstrings to learn about the requirements for
  environment variables and RCfiles (includes examples).

"""
import configparser
import logging
import os

from securesystemslib.exceptions import FormatError

import blobref.settings

# Inherits from blobref base logger (c.f. blobref.log)
LOG = logging.getLogger(__name__)


USER_PATH = os.path.expanduser("~")

# Prefix required by environment variables to be considered as blobref settings
ENV_PREFIX = "BLOBREF_"

# List of considered rcfile paths in the order they get parsed and overridden,
# i.e. the same setting in `/etc/blobref/config` and `.blobrefrc` (cwd) uses
# the latter
RC_PATHS = [
    os.path.join("/etc", "blobref", "config"),
    os.path.join(USER_PATH, ".config", "blobref", "config"),
    os.path.join(USER_PATH, ".blobrefrc"),
    ".blobrefrc",
]

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _to_bool(value):
    """Convert a boolean-ish setting string to bool."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True

    if normalized in _FALSE_VALUES:
        return False

    raise FormatError(f"expected a boolean, got '{value}'")


def _to_int(value):
    """Convert an integer setting string to int."""
    try:
        return int(value)

    except ValueError as e:
        raise FormatError(f"expected an integer, got '{value}'") from e


# Settings that may be overridden by users, with the converter applied to the
# parsed string value
BLOBREF_SETTINGS = {
    "HTTP_RAISE_FOR_STATUS": _to_bool,
    "HTTP_MAX_REDIRECTS": _to_int,
}


def get_env():
    """Parse environment for variables with prefix `ENV_PREFIX`.

    The prefix `ENV_PREFIX` is stripped from the keys in the returned dict.
    Values are returned as strings, they are converted in `set_settings`.

    Example::

        # Exporting variables in e.g. bash
        export BLOBREF_HTTP_RAISE_FOR_STATUS='true'
        export BLOBREF_HTTP_MAX_REDIRECTS='5'

    produces::

        {
          "HTTP_RAISE_FOR_STATUS": "true",
          "HTTP_MAX_REDIRECTS": "5"
        }

    Returns:
      A dictionary containing the parsed key-value pairs.

    """
    env_dict = {}

    for name, value in os.environ.items():
        if name.startswith(ENV_PREFIX) and len(name) > len(ENV_PREFIX):
            stripped_name = name[len(ENV_PREFIX) :]
            env_dict[stripped_name] = value

    return env_dict


def get_rc():
    """Read RCfiles from the paths defined in `RC_PATHS`.

    The RCfile format is as expected by Python's builtin `ConfigParser`.
    Section titles in RCfiles are ignored when parsing the key-value pairs.
    However, there has to be at least one section defined.

    The paths in `RC_PATHS` are ordered in reverse precedence, i.e. each file's
    settings override a previous file's settings, e.g. a setting defined
    in `.blobrefrc` (in the current working dir) overrides the same setting
    defined in `~/.blobrefrc` (in the user's home dir) and so on ...

    Example::

        # E.g. file `.blobrefrc` in current working directory
        [blobref]
        HTTP_RAISE_FOR_STATUS = yes
        HTTP_MAX_REDIRECTS = 3

    produces::

        {
          "HTTP_RAISE_FOR_STATUS": "yes",
          "HTTP_MAX_REDIRECTS": "3"
        }

    Side Effects:
      Reads files from disk.

    Returns:
      A dictionary containing the parsed key-value pairs.

    """
    rc_dict = {}

    config = configparser.ConfigParser()
    # Reset `optionxform`'s default case conversion to enable case-sensitivity
    config.optionxform = str
    config.read(RC_PATHS)

    for section in config.sections():
        for name, value in config.items(section):
            rc_dict[name] = value

    return rc_dict


def set_settings():
    """Override variables in `blobref.settings` with user settings.

    Reads blobref related environment variables and RCfiles and overrides
    the settings whitelisted in `BLOBREF_SETTINGS`. Settings defined in
    RCfiles take precedence over settings defined in environment variables.

    Raises:
      securesystemslib.exceptions.FormatError: A whitelisted setting has a
          value that cannot be converted to the expected type.

    Side Effects:
      Reads environment variables and files from disk.

    """
    user_settings = get_env()
    user_settings.update(get_rc())

    for setting, convert in BLOBREF_SETTINGS.items():
        user_setting = user_settings.get(setting)
        if user_setting:
            value = convert(user_setting)
            LOG.info("Setting (user): %s=%s", setting, value)
            setattr(blobref.settings, setting, value)

        else:
            default_setting = getattr(blobref.settings, setting)
            LOG.info("Setting (default): %s=%s", setting, default_setting)
