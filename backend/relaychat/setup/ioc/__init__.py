from relaychat.setup.ioc.container import build_container

__all__ = ["build_container"]
