from aclprop.api.run_config import RunConfig

__all__ = [
    "RunConfig",
]
