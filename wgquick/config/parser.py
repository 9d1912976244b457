"""
Config file loader
==================
Turns a wg-quick config file into an InterfaceDescriptor. `Address`, `DNS` and `MTU`
inside `[Interface]` are consumed here; every other line is kept verbatim for `wg setconf`.
"""

from __future__ import annotations

import logging
import os
import re
from typing import List

from wgquick.errors import ConfigOpenError, InvalidConfigNameError
from wgquick.models import InterfaceDescriptor
from wgquick.utils.validation import compile_pattern, is_interface_name, split_list

logger = logging.getLogger("wg-quick")

CONFIG_NAME_RE = compile_pattern(r"(?:^|/)([a-zA-Z0-9_=+.-]{1,16})\.conf$")


def resolve_config_path(arg: str, config_dir: str) -> str:
    """Bare interface names live in `config_dir`; anything else is a path."""
    if is_interface_name(arg):
        return os.path.join(config_dir, f"{arg}.conf")
    return arg


def _leading_int(value: str) -> int:
    m = re.match(r"\d+", value)
    return int(m.group(0)) if m else 0


def parse_config_file(arg: str, config_dir: str) -> InterfaceDescriptor:
    """Load the descriptor for `arg` (an interface name or a config path)."""
    filename = resolve_config_path(arg, config_dir)
    try:
        f = open(filename, "r", encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise ConfigOpenError(filename, e) from e
    with f:
        m = CONFIG_NAME_RE.search(filename)
        if not m:
            raise InvalidConfigNameError()
        if os.fstat(f.fileno()).st_mode & 0o007:
            logger.warning("Warning: `%s' is world accessible", filename)
        return parse_config(m.group(1), f.read(), filename)


def parse_config(name: str, text: str, path: str = "") -> InterfaceDescriptor:
    """Split config text into the fields wg-quick handles and the body for `wg setconf`."""
    body: List[str] = []
    addresses: List[str] = []
    dns_servers: List[str] = []
    mtu = 0
    in_interface = False
    for line in text.splitlines(keepends=True):
        clean = "".join(line.split())
        lower = clean.lower()
        if clean.startswith("["):
            in_interface = lower == "[interface]"
        if in_interface:
            if lower.startswith("address=") and len(clean) > 8:
                addresses.extend(split_list(clean[8:]))
                continue
            if lower.startswith("dns=") and len(clean) > 4:
                dns_servers.extend(split_list(clean[4:]))
                continue
            if lower.startswith("mtu=") and len(clean) > 4:
                mtu = _leading_int(clean[4:])
                continue
        body.append(line)
    return InterfaceDescriptor(
        name=name,
        config_body="".join(body),
        addresses=tuple(addresses),
        dns_servers=tuple(dns_servers),
        mtu=mtu,
        config_path=path,
    )
