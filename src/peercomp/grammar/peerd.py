"""Built-in flag grammar of ``peerd``, the peer daemon of the swap node.

One entry per flag, in the order ``peerd --help`` lists them. The value
domain of each flag is all the resolver needs; help texts are not carried.

``--port`` completes filesystem paths like its neighbours even though it
takes a number. That is how the daemon's own completion table behaves and it
is kept that way.
"""

from __future__ import annotations

from peercomp.models import CommandGrammar, OptionSpec, ValueDomain

OVERLAYS = ("tcp", "zmq", "http", "websocket", "smtp")
"""Transport overlays accepted by ``--overlay``, in declared order."""

_NONE = ValueDomain.none()
_PATH = ValueDomain.path()

PEERD_GRAMMAR = CommandGrammar(
    command="peerd",
    options=(
        OptionSpec(long="--help", short="-h", domain=_NONE),
        OptionSpec(long="--version", short="-V", domain=_NONE),
        OptionSpec(long="--listen", short="-L", domain=_PATH),
        OptionSpec(long="--connect", short="-C", domain=_PATH),
        OptionSpec(long="--port", short="-p", domain=_PATH),
        OptionSpec(long="--overlay", short="-o", domain=ValueDomain.enum(*OVERLAYS)),
        OptionSpec(long="--peer-secret-key", domain=_PATH),
        OptionSpec(long="--wallet-token", domain=_PATH),
        OptionSpec(long="--data-dir", short="-d", domain=_PATH),
        OptionSpec(long="--config", short="-c", domain=_PATH),
        OptionSpec(long="--verbose", domain=_NONE),
        OptionSpec(long="--tor-proxy", short="-T", domain=_PATH),
        OptionSpec(long="--msg-socket", short="-m", domain=_PATH),
        OptionSpec(long="--ctl-socket", short="-x", domain=_PATH),
        OptionSpec(long="--chain", short="-n", domain=_PATH),
        OptionSpec(long="--electrum-server", domain=_PATH),
        OptionSpec(long="--monero-daemon", domain=_PATH),
        OptionSpec(long="--monero-rpc-wallet", domain=_PATH),
    ),
)
