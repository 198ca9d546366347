"""Command-line interface for aes-avalanche."""

from __future__ import annotations

import logging
import random
import sys
from pathlib import Path

import click

from . import __version__
from .avalanche import AvalancheTarget, run_avalanche_message, run_avalanche_trials
from .cipher import decrypt_block, encrypt_block
from .config import AvalancheConfig
from .errors import AESError
from .golden import FIPS_197_TEST_VECTORS, compare_with_golden, golden_decrypt
from .key_schedule import expand_key
from .message import (
    decrypt_message,
    encrypt_message,
    iter_blocks,
    pad_message,
    read_binary,
    read_key_file,
    strip_padding,
    write_binary,
)
from .reporting import (
    export_to_csv,
    export_to_json,
    format_record_table,
    format_summary_table,
    summarize,
)
from .trace import RoundTrace

TARGET_CHOICE = click.Choice([t.value for t in AvalancheTarget])


def _load_key(key_file: str) -> bytes:
    try:
        return read_key_file(key_file)
    except AESError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="aes-avalanche")
@click.option("--verbose", "-v", is_flag=True, help="Log round-by-round detail")
def main(verbose: bool) -> None:
    """AES-128 from first principles with avalanche-effect analysis.

    Encrypt and decrypt zero-padded messages block by block, and measure
    how a single flipped plaintext or key bit spreads through the rounds.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--key-file", type=click.Path(), default="keyfile",
              help="File holding the 16-byte key as hex (default: keyfile)")
@click.option("--message", "-m", type=str, default=None, help="Message text to encrypt")
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False),
              default=None,
              help="Read the message from a file instead (zero-padded; see decrypt --keep-padding)")
@click.option("--out", "output_path", type=click.Path(), default="message.aes",
              help="Ciphertext output file (default: message.aes)")
@click.option("--trace", "trace_path", type=click.Path(), default=None,
              help="Write per-round states as JSON Lines")
def encrypt(
    key_file: str,
    message: str | None,
    input_path: str | None,
    output_path: str,
    trace_path: str | None,
) -> None:
    """Encrypt a message and write the raw ciphertext."""
    if (message is None) == (input_path is None):
        raise click.UsageError("Give exactly one of --message or --in")

    key = _load_key(key_file)
    data = message.encode() if message is not None else read_binary(input_path)

    if trace_path:
        expanded_key = expand_key(key)
        with open(trace_path, "w") as trace_file:
            ciphertext = b"".join(
                encrypt_block(block, expanded_key,
                              observer=RoundTrace(label=f"block{index}", trace_file=trace_file))
                for index, block in enumerate(iter_blocks(pad_message(data)))
            )
    else:
        ciphertext = encrypt_message(data, key)

    click.echo(f"Encrypted message in hex: {ciphertext.hex()}")
    write_binary(output_path, ciphertext)
    click.echo(f"Wrote encrypted message to file {output_path}")


@main.command()
@click.option("--key-file", type=click.Path(), default="keyfile",
              help="File holding the 16-byte key as hex (default: keyfile)")
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False),
              default="message.aes", help="Ciphertext file (default: message.aes)")
@click.option("--out", "output_path", type=click.Path(), default=None,
              help="Also write the decrypted bytes to this file")
@click.option("--keep-padding", is_flag=True,
              help="Keep trailing zero bytes (for binary input ending in NULs)")
def decrypt(
    key_file: str,
    input_path: str,
    output_path: str | None,
    keep_padding: bool,
) -> None:
    """Decrypt a ciphertext file written by 'encrypt'.

    Trailing zero bytes are stripped as padding unless --keep-padding is
    given, in which case the output length is a multiple of 16.
    """
    key = _load_key(key_file)
    ciphertext = read_binary(input_path)
    try:
        plaintext = decrypt_message(ciphertext, key)
    except AESError as e:
        raise click.ClickException(str(e)) from e
    if not keep_padding:
        plaintext = strip_padding(plaintext)

    click.echo(f"Decrypted message in hex: {plaintext.hex()}")
    click.echo(f"Decrypted message: {plaintext.decode('utf-8', errors='replace')}")
    if output_path:
        write_binary(output_path, plaintext)
        click.echo(f"Wrote decrypted message to file {output_path}")


@main.command()
@click.option("--key-file", type=click.Path(), default="keyfile",
              help="File holding the 16-byte key as hex (default: keyfile)")
@click.option("--message", "-m", type=str, required=True, help="Message text to encrypt")
@click.option("--target", type=TARGET_CHOICE, default="plaintext",
              help="Flip the bit in the plaintext or the key (default: plaintext)")
@click.option("--bit", "bit_position", type=int, required=True,
              help="Bit position to flip (0-127)")
@click.option("--out", "output_dir", type=click.Path(file_okay=False), default=".",
              help="Directory for the CSV report (default: current directory)")
@click.option("--json", "write_json", is_flag=True, help="Also write a JSON report")
def avalanche(
    key_file: str,
    message: str,
    target: str,
    bit_position: int,
    output_dir: str,
    write_json: bool,
) -> None:
    """Measure changed ciphertext bits per round for one bit flip."""
    try:
        config = AvalancheConfig(target=target, bit_position=bit_position, output_dir=output_dir)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--bit") from e

    key = _load_key(key_file)
    blocks = list(iter_blocks(pad_message(message.encode())))
    if not blocks:
        raise click.UsageError("Message must not be empty")

    records = run_avalanche_message(blocks, key, config.bit_position, config.target)

    click.echo(f"Flipped bit {config.bit_position} of the {config.target.value}")
    click.echo("")
    click.echo(format_record_table(records))

    csv_path = export_to_csv(records, config.output_dir / config.csv_name,
                             include_block=len(records) > 1)
    click.echo("")
    click.echo(f"  CSV:  {csv_path}")
    if write_json:
        json_path = export_to_json(records, csv_path.with_suffix(".json"))
        click.echo(f"  JSON: {json_path}")


@main.command()
@click.option("--n", "num_trials", type=int, default=100,
              help="Number of random experiments (default: 100)")
@click.option("--target", type=TARGET_CHOICE, default="plaintext",
              help="Flip bits in the plaintext or the key (default: plaintext)")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--out", "output_path", type=click.Path(dir_okay=False), default=None,
              help="Write records and summary as JSON")
def trials(num_trials: int, target: str, seed: int | None, output_path: str | None) -> None:
    """Average avalanche over random keys, blocks and bit positions."""
    try:
        config = AvalancheConfig(target=target, trials=num_trials, seed=seed)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--n") from e

    records = run_avalanche_trials(config.trials, config.target, seed=config.seed)

    click.echo(f"Random {config.target.value} bit flips: {config.trials} trials")
    click.echo("")
    click.echo(format_summary_table(summarize(records)))

    if output_path:
        click.echo("")
        click.echo(f"  JSON: {export_to_json(records, Path(output_path))}")


@main.command()
@click.option("--n", "num_tests", type=int, default=100,
              help="Number of random test vectors (default: 100)")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
def validate(num_tests: int, seed: int | None) -> None:
    """Check the cipher against FIPS-197 vectors and PyCryptodome."""
    failures = 0

    click.echo("Running FIPS-197 KAT tests...")
    for i, vec in enumerate(FIPS_197_TEST_VECTORS):
        xk = expand_key(vec["key"])
        ct = encrypt_block(vec["plaintext"], xk)
        if ct != vec["ciphertext"] or decrypt_block(ct, xk) != vec["plaintext"]:
            failures += 1
            click.echo(f"  KAT {i + 1}: FAIL - got {ct.hex()}, expected {vec['ciphertext'].hex()}")
    click.echo(f"FIPS-197 tests: {len(FIPS_197_TEST_VECTORS) - failures}/{len(FIPS_197_TEST_VECTORS)} passed")

    click.echo(f"\nRunning {num_tests} random tests...")
    rng = random.Random(seed)
    random_failures = 0
    for i in range(num_tests):
        key = bytes(rng.randint(0, 255) for _ in range(16))
        pt = bytes(rng.randint(0, 255) for _ in range(16))
        xk = expand_key(key)
        ct = encrypt_block(pt, xk)
        ok, detail = compare_with_golden(key, pt, ct)
        if not ok:
            random_failures += 1
            click.echo(f"  Random test {i + 1}: FAIL - {detail}")
        elif decrypt_block(ct, xk) != golden_decrypt(key, ct):
            random_failures += 1
            click.echo(f"  Random test {i + 1}: FAIL - decryption differs from PyCryptodome")
    click.echo(f"Random tests: {num_tests - random_failures}/{num_tests} passed")

    failures += random_failures
    click.echo("")
    if failures:
        click.echo(f"VALIDATION FAILED: {failures} failures")
        sys.exit(1)
    click.echo(f"VALIDATION PASSED: All {len(FIPS_197_TEST_VECTORS) + num_tests} tests passed")


if __name__ == "__main__":
    main()
