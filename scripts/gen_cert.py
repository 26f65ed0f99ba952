"""Issue a certificate signed by the provided CA.

Creates a private key and a certificate for the provided `--cn` (Common Name).
By default it writes `{out}.key` and `{out}.crt` where `out` is the path
prefix supplied via `--out` (example: `--out certs/server` -> `certs/server.key`, `certs/server.crt`).
The `.crt` file holds the full chain, leaf first, ready for a TLS server.

The CN is always added as a subject alternative name; `--san` adds more
(IP literals become IP addresses, everything else DNS names).

Example:
	python scripts/gen_cert.py --cn server.local --out certs/server --san 127.0.0.1
"""

import argparse
import logging
import os

from certnow import generate, options
from certnow.common import settings
from certnow.storage.pem import load_key_pair_files, write_chain_file, write_private_key_file


def main():
	parser = argparse.ArgumentParser(description="Issue a certificate signed by a CA")
	parser.add_argument("--cn", required=True, help="Common Name (CN) for the certificate")
	parser.add_argument("--out", required=True, help="Output path prefix (e.g. certs/server)")
	parser.add_argument("--ca-dir", default=settings.ca_dir(), help="Directory holding ca.crt and ca.key")
	parser.add_argument("--days", type=int, default=90, help="Validity period in days (default 90)")
	parser.add_argument("--san", action="append", default=[], help="Extra DNS name or IP address (repeatable)")
	args = parser.parse_args()

	logging.basicConfig(level=settings.log_level())

	# load CA
	ca = load_key_pair_files(
		os.path.join(args.ca_dir, "ca.crt"),
		os.path.join(args.ca_dir, "ca.key"),
	)

	# ensure output dir exists
	outdir = os.path.dirname(args.out)
	if outdir:
		os.makedirs(outdir, exist_ok=True)

	cert = generate(
		options.authority(ca),
		options.common_name(args.cn),
		options.add_date(0, 0, args.days),
		options.names(args.cn, *args.san),
		options.is_ca(False),
	)

	key_path = f"{args.out}.key"
	cert_path = f"{args.out}.crt"

	write_private_key_file(key_path, cert, settings.key_file_mode())
	write_chain_file(cert_path, cert, settings.cert_file_mode())

	print(f"Wrote key: {key_path}")
	print(f"Wrote cert: {cert_path}")


if __name__ == "__main__":
	main()
