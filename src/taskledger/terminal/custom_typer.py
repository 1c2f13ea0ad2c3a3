# SPDX-License-Identifier: MIT

import re
from typing import Optional

import click
import typer.core


class AliasedTyperGroup(typer.core.TyperGroup):
    """
    Commands registered as "name, alias" answer to either word.

    ``taskledger task done 3`` and ``taskledger t d 3`` resolve to the same
    command.
    """

    _ALIAS_SEPARATOR = re.compile(r"\s*,\s*")

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.__registered_name(cmd_name))

    def __registered_name(self, typed_name: str) -> str:
        for registered_name in self.commands:
            if typed_name in self._ALIAS_SEPARATOR.split(registered_name):
                return registered_name
        return typed_name


class OrderedAliasedTyperGroup(AliasedTyperGroup):
    """Lists the top-level groups in a fixed order, then anything else."""

    desired_order = [
        "task, t",
        "close, cl",
        "stats, st",
        "reconcile, rc",
        "config, c",
    ]

    def list_commands(self, ctx: click.Context) -> list[str]:
        ordered = [name for name in self.desired_order if name in self.commands]
        return ordered + [name for name in self.commands if name not in ordered]
