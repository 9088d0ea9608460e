"""
Configuration for the LL(1) grammar workbench.

Grammar settings are handed to the analyzer explicitly; server settings are
read from the environment when the service starts.
"""

import os
from dataclasses import dataclass


@dataclass
class GrammarConfig:
    """Markers and solver options used by the LL(1) analyzer."""
    start_symbol: str = 'S'
    end_marker: str = '#'
    empty: str = '$'
    empty_display: str = 'ε'
    # Re-run the FIRST/FOLLOW closures until nothing changes. When False a
    # single pass is made, which can leave FOLLOW sets of mutually
    # dependent variables incomplete.
    fixpoint: bool = True


@dataclass
class ServerConfig:
    """Network settings for the Flask service."""
    host: str = '127.0.0.1'
    port: int = 5000
    debug: bool = False

    @classmethod
    def from_env(cls) -> 'ServerConfig':
        return cls(
            host=os.environ.get('LL1_HOST', cls.host),
            port=int(os.environ.get('LL1_PORT', cls.port)),
            debug=os.environ.get('LL1_DEBUG', '').lower() in ('1', 'true', 'yes'),
        )
