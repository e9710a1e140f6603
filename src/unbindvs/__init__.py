"""Strip source-control bindings from Visual Studio solutions and projects."""

__version__ = "0.1.0"
