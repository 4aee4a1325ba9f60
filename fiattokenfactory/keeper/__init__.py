"""
Keeper package: state access and transitions, the msg server, the transfer
hook, and genesis import/export.
"""

from .bank import BankKeeper
from .genesis import GenesisState, export_genesis, init_genesis
from .keeper import Keeper
from .msg_server import MsgServer
from .restrictions import SendRestriction

__all__ = [
    "BankKeeper",
    "GenesisState",
    "Keeper",
    "MsgServer",
    "SendRestriction",
    "export_genesis",
    "init_genesis",
]
