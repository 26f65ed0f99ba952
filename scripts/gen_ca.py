"""Create a Root CA (private key + self-signed X.509 certificate).

Generates a key (RSA 4096 by default, or EC with --curve) and a
self-signed CA certificate and writes them as PEM files under the
CERTNOW_CA_DIR directory (default `certs/ca`).

Example:
	python scripts/gen_ca.py --name "Dev Root CA" --curve P-256
"""

import argparse
import logging
import os

from cryptography.hazmat.primitives.asymmetric import ec

from certnow import KeyUsage, generate, options
from certnow.common import settings
from certnow.storage.pem import write_certificate_file, write_private_key_file

CURVES = {
	"P-256": ec.SECP256R1,
	"P-384": ec.SECP384R1,
	"P-521": ec.SECP521R1,
}


def main():
	parser = argparse.ArgumentParser(description="Generate a Root CA (self-signed)")
	parser.add_argument("--name", required=True, help="Common Name for the Root CA")
	parser.add_argument("--outdir", default=settings.ca_dir(), help="Output directory for CA files")
	parser.add_argument("--years", type=int, default=10, help="Validity period in years (default 10)")
	parser.add_argument("--curve", choices=sorted(CURVES), help="Use an EC key on this curve instead of RSA")
	args = parser.parse_args()

	logging.basicConfig(level=settings.log_level())

	outdir = args.outdir
	os.makedirs(outdir, exist_ok=True)

	key_option = options.ecdsa(CURVES[args.curve]) if args.curve else options.rsa(4096)
	ca = generate(
		options.common_name(args.name),
		options.add_date(args.years, 0, 0),
		key_option,
		options.key_usage(KeyUsage.DIGITAL_SIGNATURE | KeyUsage.KEY_CERT_SIGN | KeyUsage.CRL_SIGN),
		options.ext_key_usage(),
		options.is_ca(True),
	)

	key_path = os.path.join(outdir, "ca.key")
	cert_path = os.path.join(outdir, "ca.crt")

	write_private_key_file(key_path, ca, settings.key_file_mode())
	write_certificate_file(cert_path, ca, settings.cert_file_mode())

	print(f"Wrote CA key: {key_path}")
	print(f"Wrote CA cert: {cert_path}")


if __name__ == "__main__":
	main()
