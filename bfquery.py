#!/usr/bin/env python3
"""Query a Battlefield 4 server over UDP and print what it reports.

Usage:
    python bfquery.py show <guid|name>            # lookup on Battlelog, query, print
    python bfquery.py show <guid> --json          # same, as JSON
    python bfquery.py query <ip:port> <gameId>    # skip the Battlelog lookup
    python bfquery.py watch <guid|name> -p 10     # poll and log queue/player counts
    python bfquery.py decode serverData.bin       # decode a saved datagram
    python bfquery.py servers                     # list saved servers
    python bfquery.py add <name> <guid>           # save a server
"""
import argparse
import json
import logging
import sys
import time
from typing import Optional, List, Tuple

from application import AppPrefs
from battlelog import get_server_show
from constants import APP_NAME, APP_VERSION, DUMP_FILENAME, MAX_FAILS_BEFORE_OFFLINE, PLATFORMS
from decoder import ServerInfoDecoder
from display import format_server_info
from errors import QueryError, DecodeError
from polls import PollResult
from protocol import ChallengeResponseProtocol
from server import ServerProfile
from transport import UdpTransport
from utils import (
    load_prefs, load_servers, save_servers, find_profile, parse_address, parse_game_id,
    now_utc_hms, now_utc_iso, server_csv_path, append_server_csv, dump_datagram, error_dump_path,
)

log = logging.getLogger(APP_NAME)


def resolve(key: str, platform: str, refresh: bool = False) -> ServerProfile:
    """Saved profile by name/guid, falling back to a Battlelog lookup of `key` as a guid."""
    saved = find_profile(load_servers(), key)
    profile = ServerProfile.from_dict(saved) if saved else ServerProfile(name=key, guid=key, platform=platform)
    if profile.resolved and not refresh:
        return profile
    show = get_server_show(profile.guid, profile.platform)
    profile.address = show.address
    profile.game_id = show.game_id
    log.info("%s -> %s:%d gameId %d", profile.guid, show.ip, show.port, show.game_id)
    return profile


def print_info(info, as_json: bool) -> None:
    if as_json:
        print(json.dumps(info.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_server_info(info))


def query_and_print(address: Tuple[str, int], game_id: int, prefs: AppPrefs, as_json: bool, dump: bool) -> int:
    with UdpTransport(address, timeout=prefs.timeout) as transport:
        proto = ChallengeResponseProtocol(transport)
        data = proto.fetch_datagram(game_id)
    if dump or prefs.dump_raw:
        print(f"Raw datagram saved to {dump_datagram(data, DUMP_FILENAME)}", file=sys.stderr)
    print_info(proto.decoder.decode(data), as_json)
    return 0


def poll_once(proto: ChallengeResponseProtocol, game_id: int, profile_name: str) -> PollResult:
    try:
        data = proto.fetch_datagram(game_id)
    except QueryError as e:
        return PollResult.failed(str(e))
    try:
        info = proto.decoder.decode(data)
    except DecodeError as e:
        path = dump_datagram(data, error_dump_path(profile_name))
        log.warning("Decode failed, datagram saved to %s", path)
        return PollResult.failed(str(e))
    return PollResult.from_info(info)


def watch(profile: ServerProfile, prefs: AppPrefs, count: Optional[int] = None) -> int:
    csv_path = server_csv_path(profile.name) if prefs.log_players else None
    fail_count = 0
    polls = 0
    with UdpTransport(profile.address, timeout=prefs.timeout) as transport:
        proto = ChallengeResponseProtocol(transport)
        while count is None or polls < count:
            polls += 1
            result = poll_once(proto, profile.game_id, profile.name)
            print(f"{now_utc_hms()} | {result.summary()}")
            if result.ok:
                fail_count = 0
                if csv_path:
                    append_server_csv(csv_path, [now_utc_iso(), result.map_name, result.queue,
                                                 result.player_count, result.joining, result.max_players])
            else:
                fail_count += 1
                if fail_count == MAX_FAILS_BEFORE_OFFLINE:
                    log.warning("%s looks offline after %d failed queries", profile.name, fail_count)
                # a fresh socket also means a fresh challenge on the next poll
                try:
                    transport.reconnect()
                except OSError as e:
                    # the next poll connects again and counts as another failure
                    log.warning("Reconnect to %s failed: %s", profile.name, e)
            if count is None or polls < count:
                time.sleep(prefs.poll_interval)
    return 0


def cmd_show(args, prefs: AppPrefs) -> int:
    profile = resolve(args.server, args.platform or prefs.platform, args.refresh)
    return query_and_print(profile.address, profile.game_id, prefs, args.json, args.dump)


def cmd_query(args, prefs: AppPrefs) -> int:
    return query_and_print(parse_address(args.address), parse_game_id(args.game_id), prefs, args.json, args.dump)


def cmd_watch(args, prefs: AppPrefs) -> int:
    if args.poll_interval:
        prefs.poll_interval = max(1, args.poll_interval)
    profile = resolve(args.server, args.platform or prefs.platform, args.refresh)
    print(f"Watching {profile.name} ({profile.address[0]}:{profile.address[1]}) every {prefs.poll_interval}s, Ctrl+C to stop")
    try:
        return watch(profile, prefs, args.count)
    except KeyboardInterrupt:
        return 0


def cmd_decode(args, prefs: AppPrefs) -> int:
    with open(args.file, "rb") as f:
        data = f.read()
    print_info(ServerInfoDecoder().decode(data), args.json)
    return 0


def cmd_servers(args, prefs: AppPrefs) -> int:
    profiles = [ServerProfile.from_dict(d) for d in load_servers()]
    if not profiles:
        print("No saved servers. Add one with: bfquery.py add <name> <guid>")
        return 0
    for p in profiles:
        addr = f"{p.address[0]}:{p.address[1]}" if p.address else "unresolved"
        print(f"{p.name:24} {p.platform:8} {addr:22} {p.guid}")
    return 0


def cmd_add(args, prefs: AppPrefs) -> int:
    servers = load_servers()
    if find_profile(servers, args.name):
        print(f"A server named {args.name!r} already exists", file=sys.stderr)
        return 1
    profile = ServerProfile(name=args.name, guid=args.guid, platform=args.platform or prefs.platform)
    if args.resolve:
        profile = resolve(profile.guid, profile.platform)
        profile.name = args.name
    servers.append(profile.to_dict())
    save_servers(servers)
    print(f"Saved {profile.name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bfquery", description="Battlefield 4 UDP server query")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("-t", "--timeout", type=float, help="send/receive timeout in seconds")
    sub = parser.add_subparsers(dest="command", required=True)

    def server_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("server", help="saved server name or Battlelog guid")
        p.add_argument("--platform", choices=PLATFORMS)
        p.add_argument("--refresh", action="store_true", help="ignore the cached address and gameId")

    def output_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--json", action="store_true")
        p.add_argument("--dump", action="store_true", help=f"save the raw datagram to {DUMP_FILENAME}")

    p = sub.add_parser("show", help="look up a server on Battlelog and query it")
    server_args(p)
    output_args(p)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("query", help="query an ip:port directly")
    p.add_argument("address")
    p.add_argument("game_id")
    output_args(p)
    p.set_defaults(func=cmd_query)

    p = sub.add_parser("watch", help="poll queue and player counts")
    server_args(p)
    p.add_argument("-p", "--poll-interval", type=int)
    p.add_argument("-n", "--count", type=int, help="stop after this many polls")
    p.set_defaults(func=cmd_watch)

    p = sub.add_parser("decode", help="decode a saved datagram")
    p.add_argument("file")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("servers", help="list saved servers")
    p.set_defaults(func=cmd_servers)

    p = sub.add_parser("add", help="save a server")
    p.add_argument("name")
    p.add_argument("guid")
    p.add_argument("--platform", choices=PLATFORMS)
    p.add_argument("--resolve", action="store_true", help="look it up now and cache address and gameId")
    p.set_defaults(func=cmd_add)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    prefs = load_prefs()
    if args.timeout:
        prefs.timeout = args.timeout
    try:
        return args.func(args, prefs)
    except QueryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
