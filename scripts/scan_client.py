"""Simulated card reader: posts one tap (or a stream of typed UIDs) to /scan."""
import argparse
import os
import sys

import requests
from dotenv import load_dotenv

load_dotenv()

SERVER_IP = os.getenv("SERVER_IP", "127.0.0.1")
SERVER_PORT = os.getenv("SERVER_PORT", "8000")
DEVICE_CODE = os.getenv("DEVICE_CODE", "DEV001")
GATEWAY_CODE = os.getenv("GATEWAY_CODE", "MAIN_GATE")

API_URL = f"http://{SERVER_IP}:{SERVER_PORT}/scan"


def send_scan(card_uid, device_code, gateway_code, lecture_id=None):
    payload = {
        "card_uid": card_uid,
        "device_code": device_code,
        "gateway_code": gateway_code,
    }
    if lecture_id:
        payload["lecture_id"] = lecture_id

    try:
        response = requests.post(API_URL, json=payload, timeout=5)
    except requests.RequestException as e:
        print(f"[!] Scan server unreachable: {e}")
        return False

    try:
        data = response.json()
    except ValueError:
        print(f"[-] {response.status_code}: {response.text[:200]}")
        return False

    if response.status_code == 200:
        student = data["student"]
        print(
            f"[+] {student['first_name']} {student['last_name']} ({student['student_id']}) "
            f"-> {data['status']} at {data['scanned_at']}"
        )
        return True

    print(f"[-] {response.status_code}: {data.get('error')}")
    return False


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("card_uid", nargs="?", help="Card UID; omit to read UIDs from stdin")
    parser.add_argument("--device", default=DEVICE_CODE)
    parser.add_argument("--gateway", default=GATEWAY_CODE)
    parser.add_argument("--lecture", default=None, help="Lecture id for classroom scans")
    args = parser.parse_args(argv)

    if args.card_uid:
        ok = send_scan(args.card_uid, args.device, args.gateway, args.lecture)
        return 0 if ok else 1

    # Reader mode: one UID per line, like a keyboard-wedge NFC reader
    print(f"Reading card UIDs for {args.gateway}/{args.device} (Ctrl+C to stop)")
    try:
        for line in sys.stdin:
            uid = line.strip()
            if uid:
                send_scan(uid, args.device, args.gateway, args.lecture)
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
