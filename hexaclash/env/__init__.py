"""Gymnasium environment for Hexaclash."""

from .gym_env import HexaclashEnv

__all__ = ["HexaclashEnv"]
