"""Companion-computer building blocks: chunked UDP messaging, local JSON settings, option parsing, Raspberry Pi detection, GPIO, LED and buzzer drivers."""

__version__ = "0.1.0"