#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CLI commands module for wg-quick.
This module contains the `up` and `down` command handlers and maps errors to exit codes.
"""
import errno
import logging
from typing import Any, Dict, Optional

from wgquick.backend import CommandRunner, get_backends
from wgquick.config import parse_config_file
from wgquick.errors import WgQuickError
from wgquick.orchestration import DnsRouteConfigurator, InterfaceLifecycle
from wgquick.utils.validation import fail

logger = logging.getLogger("wg-quick")


class CLICommands:
    """CLI commands handler."""

    def __init__(self, tool_cfg: Dict[str, Any], lifecycle: Optional[InterfaceLifecycle] = None):
        self.tool_cfg = tool_cfg
        if lifecycle is None:
            runner = CommandRunner()
            networking, policy = get_backends(tool_cfg.get("policy_driver", "ndc"), runner)
            configurator = DnsRouteConfigurator(
                networking,
                policy,
                fwmark=tool_cfg.get("fwmark", 0x20000),
                network_users=tool_cfg.get("network_users", "0-99999"),
            )
            lifecycle = InterfaceLifecycle(networking, policy, runner, configurator=configurator)
        self.lifecycle = lifecycle

    def up(self, target: str) -> None:
        """Bring up the interface described by `target`."""
        try:
            descriptor = parse_config_file(target, self.tool_cfg["config_dir"])
            binding = self.lifecycle.up(descriptor)
            logger.debug("%s is up on network %d", descriptor.name, binding.network_id)
        except WgQuickError as e:
            fail(str(e), e.exit_code)
        except MemoryError:
            fail("Out of memory", errno.ENOMEM)
        except Exception as e:
            fail(str(e), 1)

    def down(self, target: str) -> None:
        """Tear down the interface described by `target`."""
        try:
            descriptor = parse_config_file(target, self.tool_cfg["config_dir"])
            self.lifecycle.down(descriptor.name)
        except WgQuickError as e:
            fail(str(e), e.exit_code)
        except MemoryError:
            fail("Out of memory", errno.ENOMEM)
        except Exception as e:
            fail(str(e), 1)
