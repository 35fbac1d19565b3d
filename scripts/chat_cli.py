#!/usr/bin/env python3
import argparse
import sys

import requests

from codeassist.client import ClientSession

HELP_TEXT = """Commands:
  /new [title]   start a new conversation
  /load <id>     switch to an existing conversation
  /list          list conversations
  /rename <t>    rename the current conversation
  /clear         clear the current conversation
  /delete        delete the current conversation
  /temp <value>  set the temperature (0-1)
  /quit          exit
Anything else is sent to the assistant."""


def _print_sessions(client: ClientSession) -> None:
    for session in client.list_sessions():
        marker = '*' if session['id'] == client.session_id else ' '
        print(f"{marker} {session['id']}  {session['title']}  ({session['updatedAt']})")


def _handle_command(client: ClientSession, line: str) -> bool:
    command, _, arg = line.partition(' ')
    arg = arg.strip()
    if command == '/quit':
        return False
    if command == '/new':
        session = client.new_session(arg or None)
        print(f"started {session['id']}")
    elif command == '/load' and arg:
        for message in client.load(arg):
            print(f"[{message.sender}] {message.content}")
    elif command == '/list':
        _print_sessions(client)
    elif command == '/rename' and arg:
        client.rename(arg)
    elif command == '/clear':
        client.clear()
    elif command == '/delete':
        client.delete()
        print(f"now on {client.session_id}")
    elif command == '/temp' and arg:
        client.update_settings(temperature=float(arg))
    else:
        print(HELP_TEXT)
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description='Terminal chat against the CodeAssist API')
    parser.add_argument('--base-url', default='http://127.0.0.1:8000')
    parser.add_argument('--session-id', default=None)
    args = parser.parse_args()

    client = ClientSession(base_url=args.base_url)
    if args.session_id:
        client.load(args.session_id)

    print(f"session {client.session_id}; /help for commands")
    for raw in sys.stdin:
        line = raw.strip()
        if not line:
            continue
        try:
            if line.startswith('/'):
                if not _handle_command(client, line):
                    break
                continue
            reply = client.send(line)
        except (requests.RequestException, ValueError) as exc:
            print(f"error: {exc}")
            continue
        print(f"[bot] {reply.content}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
