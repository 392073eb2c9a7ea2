"""
Example netc client talking to an echo socket.

Start a Unix echo socket first, for example with socat:
    rm -f /tmp/mysocket && socat UNIX-LISTEN:/tmp/mysocket,fork exec:'/bin/cat'

Then run:
    python examples/echo_client.py
    python examples/echo_client.py --network tcp --address localhost:7000
    python examples/echo_client.py --config examples/config.yaml
"""
import argparse
import logging
from typing import Callable, Optional

from netc import NetClient, load_config, run_with_keyboard_interrupt

PANGRAM = "The quick brown fox jumps over the lazy dog"

logger = logging.getLogger("echo_client")


def on_response(data: bytes, err: Optional[Exception], done: Callable[[], None]) -> None:
    if err is not None:
        raise err
    logger.info(f"client data received: {data.decode(errors='replace')}")
    done()


def send_words(client: NetClient) -> None:
    for word in PANGRAM.split():
        logger.info(f"client data sent: {word}")
        client.write(word.encode(), on_response)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a pangram to an echo socket, word by word")
    parser.add_argument("--network", default="unix", help="network family: tcp, tcp4, tcp6 or unix")
    parser.add_argument("--address", default="/tmp/mysocket", help="socket path or host:port")
    parser.add_argument("--config", help="YAML file with a 'netc' section; the first entry is used")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.config:
        client = NetClient.from_config(load_config(args.config)[0])
    else:
        client = NetClient(args.network, args.address)

    print("=== First example")
    client.connect()
    send_words(client)
    client.close()

    print("=== Second example (reconnection)")
    client.connect()
    send_words(client)
    client.close()


if __name__ == "__main__":
    run_with_keyboard_interrupt(main)
