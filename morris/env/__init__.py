"""Gymnasium environment wrapping the rules engine."""

from .gym_env import MorrisEnv, action_space_size, decode_action, encode_action

__all__ = ["MorrisEnv", "action_space_size", "decode_action", "encode_action"]
