from .ik_config import EPSILON, LAMBDA, ConfigLoadResult, load_ik_config

__all__ = ["EPSILON", "LAMBDA", "ConfigLoadResult", "load_ik_config"]
