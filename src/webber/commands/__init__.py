"""Built-in CLI sub-command groups for webber.

* :mod:`~webber.commands.config` -- view and modify the global config.
* :mod:`~webber.commands.cache` -- inspect the offline cache.

The single-purpose commands (``get``, ``cached``, ``watch``, ``reachable``)
live directly in :mod:`webber.app`.
"""
