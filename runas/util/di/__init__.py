from runas.util.di.scope import Scope

__all__ = ["Scope"]
