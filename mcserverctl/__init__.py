"""Run and look after a Minecraft server: process control, configuration files, modpacks, metrics and alerts."""

__version__ = "0.1.0"