"""Configuration templates with ``{{ key }}`` placeholders."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from .errors import ConfigError

TEMPLATES_DIR = "templates"


def _slot(name: str) -> str:
    """Return the placeholder text for ``name``."""
    return f"{{{{ {name} }}}}"


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _yaml_lines(mapping: Mapping[str, Any], indent: int = 0) -> Iterator[str]:
    pad = " " * indent
    for key, value in mapping.items():
        if isinstance(value, Mapping):
            if value:
                yield f"{pad}{key}:"
                yield from _yaml_lines(value, indent + 2)
            else:
                yield f"{pad}{key}: {{}}"
        elif isinstance(value, list):
            yield f"{pad}{key}:"
            yield from (f"{pad}- {item}" for item in value)
        else:
            yield f"{pad}{key}: {_scalar(value)}"


def _render_yaml(mapping: Mapping[str, Any]) -> str:
    return "".join(f"{line}\n" for line in _yaml_lines(mapping))


_PROPERTY_SLOTS = [
    ("server-port", "port"),
    ("gamemode", "gamemode"),
    ("difficulty", "difficulty"),
    ("level-seed", "seed"),
    ("enable-command-block", "command_blocks"),
    ("max-players", "max_players"),
    ("spawn-protection", "spawn_protection"),
    ("view-distance", "view_distance"),
    ("spawn-npcs", "spawn_npcs"),
    ("spawn-animals", "spawn_animals"),
    ("spawn-monsters", "spawn_monsters"),
    ("pvp", "pvp"),
]

SERVER_PROPERTIES_TEMPLATE = "".join(
    [
        "#Minecraft server properties\n",
        f"#{_slot('timestamp')}\n",
        *(f"{key}={_slot(slot)}\n" for key, slot in _PROPERTY_SLOTS),
    ]
)

_CROPS = (
    "cactus", "cane", "melon", "mushroom", "pumpkin", "sapling", "beetroot",
    "carrot", "potato", "wheat", "netherwart", "vine", "cocoa",
)

_SPIGOT = {
    "settings": {
        "bungeecord": False,
        "restart-on-crash": True,
        "restart-script-location": "./start.sh",
        "sample-count": 12,
        "timeout-time": 60,
        "player-shuffle": 0,
        "user-cache-size": 1000,
        "save-user-cache-on-stop-only": False,
    },
    "messages": {
        "restart": "Server is restarting",
        "whitelist": "You are not whitelisted on this server!",
        "unknown-command": 'Unknown command. Type "/help" for help.',
        "server-full": "The server is full!",
        "outdated-client": f"Outdated client! Please use {_slot('minecraft_version')}",
        "outdated-server": f"Outdated server! I'm still on {_slot('minecraft_version')}",
    },
    "advancements": {
        "disable-saving": False,
        "disabled": ["minecraft:story/disabled_advancement"],
    },
    "stats": {"disable-saving": False, "forced-stats": {}},
    "commands": {
        "spam-exclusions": ["/skill"],
        "silent-commandblock-console": False,
        "replace-commands": ["setblock", "summon", "testforblock", "tellraw"],
        "log": True,
        "tab-complete": 0,
        "send-namespaced": True,
    },
    "players": {"disable-saving": False},
    "world-settings": {
        "default": {
            "verbose": False,
            "mob-spawn-range": 6,
            "growth": {f"{crop}-modifier": 100 for crop in _CROPS},
            "entity-activation-range": {
                "animals": 32,
                "monsters": 32,
                "raiders": 48,
                "misc": 16,
                "water": 16,
                "villagers": 32,
                "flying-monsters": 32,
            },
            "entity-tracking-range": {
                "players": 48,
                "animals": 48,
                "monsters": 48,
                "misc": 32,
                "other": 64,
            },
            "ticks-per": {"hopper-transfer": 8, "hopper-check": 1},
            "hopper-amount": 1,
            "merge-radius": {"item": 2.5, "exp": 3.0},
            "item-despawn-rate": 6000,
            "view-distance": _slot("view_distance"),
            "enable-zombie-pigmen-portal-spawns": True,
            "wither-spawn-sound-radius": 0,
            "arrow-despawn-rate": 1200,
            "zombie-aggressive-towards-villager": True,
            "nerf-spawner-mobs": False,
        },
    },
}

_BUKKIT = {
    "settings": {
        "allow-end": True,
        "warn-on-overload": True,
        "permissions-file": "permissions.yml",
        "update-folder": "update",
        "plugin-profiling": False,
        "connection-throttle": 4000,
        "query-plugins": True,
        "deprecated-verbose": "default",
        "shutdown-message": "Server closed",
        "minimum-api": "none",
    },
    "spawn-limits": {
        "monsters": 70,
        "animals": 10,
        "water-animals": 5,
        "water-ambient": 20,
        "water-underground-creature": 5,
        "ambient": 15,
    },
    "chunk-gc": {"period-in-ticks": 600},
    "ticks-per": {
        "animal-spawns": 400,
        "monster-spawns": 1,
        "water-spawns": 1,
        "water-ambient-spawns": 1,
        "water-underground-creature-spawns": 1,
        "ambient-spawns": 1,
        "autosave": 6000,
    },
    "aliases": "now-in-commands.yml",
}

SPIGOT_TEMPLATE = _render_yaml(_SPIGOT)
BUKKIT_TEMPLATE = _render_yaml(_BUKKIT)

DEFAULT_TEMPLATES = {
    "server.properties.tmpl": SERVER_PROPERTIES_TEMPLATE,
    "spigot.yml.tmpl": SPIGOT_TEMPLATE,
    "bukkit.yml.tmpl": BUKKIT_TEMPLATE,
}


def apply_template(
    server_directory,
    template_name: str,
    replacements: Mapping[str, str],
    output_path,
) -> None:
    """Render a template from the server's templates directory into ``output_path``."""
    template_path = Path(server_directory) / TEMPLATES_DIR / template_name
    if not template_path.exists():
        raise ConfigError(f"Template file {template_name} not found")

    result = template_path.read_text(encoding="utf-8")
    for key, value in replacements.items():
        result = result.replace(_slot(key), value)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")


def install_default_templates(server_directory) -> None:
    """Create the templates directory and any missing default templates."""
    templates_dir = Path(server_directory) / TEMPLATES_DIR
    templates_dir.mkdir(parents=True, exist_ok=True)
    for name, content in DEFAULT_TEMPLATES.items():
        path = templates_dir / name
        if not path.exists():
            path.write_text(content, encoding="utf-8")