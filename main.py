"""
MiMC 증명 비교 실행기
=====================

SNARK, STARK, bulletproof 순서로 MiMC preimage 증명을 만들고 검증한 뒤
증명 크기와 보안 수준을 출력한다. --samples를 주면 평균 증명/검증 시간도 출력한다.

    python main.py --rounds 255 --samples 10 --backend all
"""

import argparse
import logging
import sys

from nizkp.bench import benchmark, iter_backends
from nizkp.config import BACKENDS, MIMC_ROUNDS, BenchmarkConfig
from nizkp.errors import ConfigurationError, VerificationFailed

SEPARATOR = "\n------------------------------------------------------------------------\n"

TITLES = {
    "snark": "zk-SNARK",
    "stark": "zk-STARK",
    "bulletproof": "Bulletproof",
}


def format_metrics(metrics):
    return (
        "Proof metrics: \n"
        f"\tSize runtime (bytes): {metrics.runtime_size} \n"
        f"\tSize serialized (bytes): {metrics.serialized_size} \n"
        f"\tSecurity level (bits): {metrics.security_label()}"
    )


def print_report(report):
    title = TITLES[report.backend]
    print(format_metrics(report.metrics))
    for key, value in report.metrics.extra.items():
        print(f"\t{key}: {value}")
    if report.samples:
        print(f"Average proving time ({report.samples} samples): {report.prove_avg} seconds")
        print(f"Average verifying time ({report.samples} samples): {report.verify_avg} seconds")
    print(f"{title} MiMC hash done!")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compare MiMC preimage proofs across proof systems")
    parser.add_argument("--rounds", type=int, default=MIMC_ROUNDS,
                        help="number of MiMC rounds (STARK needs rounds + 1 to be a power of two >= 8)")
    parser.add_argument("--samples", type=int, default=0,
                        help="number of timed prove/verify samples per backend")
    parser.add_argument("--backend", choices=("all",) + BACKENDS, default="all")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = BenchmarkConfig(
        rounds=args.rounds,
        samples=args.samples,
        backends=BACKENDS if args.backend == "all" else (args.backend,),
    )
    print(SEPARATOR)
    try:
        for backend in iter_backends(config):
            print(f"Running {TITLES[backend.name]} MiMC hash...")
            print_report(benchmark(backend, config.samples))
            print(SEPARATOR)
    except (ConfigurationError, VerificationFailed) as e:
        logging.getLogger(__name__).error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
