"""Shared fixtures: a small ``mycli`` spec exercising every flag kind."""

import pytest

from cmdnav.spec_loader import spec_from_dict


MYCLI = {
    "name": "My CLI",
    "bin": "mycli",
    "about": "Example tool",
    "cmd": {
        "flags": [
            {"short": ["v"], "long": ["verbose"], "count": True, "global": True, "help": "More output"},
            {"long": ["color"], "choices": ["auto", "always", "never"], "global": True, "help": "Colorize"},
            {"long": ["dry-run"], "help": "Only print actions"},
            {"long": ["secret"], "hide": True},
        ],
        "subcommands": [
            {
                "name": "init",
                "help": "Create a new project",
                "args": [{"name": "name", "help": "Project name"}],
            },
            {
                "name": "config",
                "help": "Manage settings",
                "subcommands": [
                    {"name": "get", "args": [{"name": "key", "required": True}]},
                    {"name": "set", "args": [{"name": "key", "required": True}, {"name": "value"}]},
                ],
            },
            {
                "name": "run",
                "help": "Execute a task",
                "flags": [
                    {"short": ["j"], "long": ["jobs"], "arg": "N", "help": "Parallel jobs"},
                    {"short": ["f"], "long": ["force"], "help": "Skip checks"},
                ],
                "args": [{"name": "task", "required": True}],
            },
            {
                "name": "deploy",
                "help": "Ship to an environment",
                "aliases": ["push"],
                "flags": [{"long": ["tag"], "arg": "TAG", "help": "Release tag"}],
                "args": [
                    {"name": "environment", "required": True, "choices": ["dev", "staging", "prod"]}
                ],
            },
            {"name": "debug", "hide": True},
        ],
    },
}


@pytest.fixture
def spec_data():
    return MYCLI


@pytest.fixture
def spec():
    return spec_from_dict(MYCLI)


@pytest.fixture
def anyio_backend():
    return "asyncio"
