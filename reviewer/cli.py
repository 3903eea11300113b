"""CLI entrypoint for the review pipeline."""

import argparse
import asyncio
import json
import logging
import os
import sys
import warnings
from pathlib import Path

from reviewer.core.config import DEFAULT_MODELS, LLM_PROVIDER, API_KEY_ENV_VAR
from reviewer.pydantic_models.processing import PROCESSING_METHODS

# Suppress LiteLLM's direct prints (must be before import)
os.environ["LITELLM_LOG"] = "ERROR"

# Suppress noisy warnings before any imports
warnings.filterwarnings("ignore", message="Pydantic serializer warnings")
warnings.filterwarnings("ignore", category=UserWarning, module="pydantic")
warnings.filterwarnings("ignore", message="Unclosed client session")
warnings.filterwarnings("ignore", category=ResourceWarning)

# Suppress noisy loggers (HTTP clients, LiteLLM internals)
for logger_name in ["httpx", "httpcore", "litellm", "LiteLLM",
                    "LiteLLM Proxy", "LiteLLM Router", "aiohttp", "asyncio"]:
    logging.getLogger(logger_name).setLevel(logging.ERROR)

from dotenv import load_dotenv  # noqa: E402 - must be after logging config

# Load environment variables
load_dotenv()

MODEL_METHODS = ("company_llm", "external_ai")


def _check_api_key() -> bool:
    """Print setup help when the provider key is missing."""
    if os.environ.get(API_KEY_ENV_VAR):
        return True
    print(f"Error: {API_KEY_ENV_VAR} not set")
    if LLM_PROVIDER == "azure":
        print("For Azure, set: AZURE_API_KEY, AZURE_API_BASE, AZURE_API_VERSION")
    else:
        print("Set it in .env or export OPENROUTER_API_KEY=...")
    return False


def _write_json(path: Path, payload: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return path


async def analyze(
    pdf_path: str,
    method: str = "local_patterns",
    output_dir: str = "outputs",
    model: str | None = None,
    include_rules: bool = False,
    no_sanitize: bool = False,
    disabled_rules: list[str] | None = None,
    screenshots: bool = False,
    save: bool = False,
    verbose: bool = False,
) -> dict | None:
    """Review one PDF and write the result to ``<output_dir>/json``.

    Args:
        pdf_path: Path to the PDF file.
        method: Processing method name.
        output_dir: Directory for output files.
        model: Model override for model-based methods.
        include_rules: Also run rule detectors alongside the model.
        no_sanitize: Send unredacted text to the company model.
        disabled_rules: Pattern rule ids to switch off (local_patterns).
        screenshots: Attach page screenshots to issues.
        save: Persist the result in ``<output_dir>/results``.
        verbose: Verbose output.

    Returns:
        Wire-format result dict, or None on failure.
    """
    # Import here to avoid circular imports
    from reviewer.core.result_store import JsonResultStore
    from reviewer.orchestrator import ReviewOrchestrator
    from reviewer.pydantic_models.processing import parse_processing_method

    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        print(f"Error: File not found: {pdf_path}")
        return None

    if method in MODEL_METHODS and not _check_api_key():
        return None

    method_fields: dict = {"method": method}
    if method in MODEL_METHODS:
        if model:
            method_fields["model"] = model
        method_fields["include_rule_detectors"] = include_rules
    if method == "company_llm":
        method_fields["sanitize"] = not no_sanitize
    if method == "local_patterns":
        method_fields["disabled_rules"] = disabled_rules or []
    processing = parse_processing_method(method_fields)

    output_dir = Path(output_dir)
    logs_dir = output_dir / "logs"

    print(f"\n{'='*50}")
    print(f"Reviewing: {pdf_path.name}")
    print(f"{'='*50}")
    print(f"  Method: {processing.method}")
    if method in MODEL_METHODS:
        print(f"  Provider: {LLM_PROVIDER}")
        print(f"  Model: {processing.model.replace('openrouter/', '').replace('azure/', '')}")
        print(f"  Rule detectors: {'ON' if include_rules else 'OFF'}")
    print(f"  Screenshots: {'ON' if screenshots else 'OFF'}")
    print()

    try:
        orchestrator = ReviewOrchestrator(
            store=JsonResultStore(output_dir / "results") if save else None,
            screenshots=screenshots,
            verbose=verbose,
            log_dir=logs_dir,
        )
        outcome = await orchestrator.review_file(pdf_path, processing)
        payload = outcome.to_dict()

        output_file = _write_json(output_dir / "json" / f"{pdf_path.stem}.json", payload)
        print(f"\n[OUTPUT] {output_file}")
        if save and not outcome.saved:
            print(f"[WARN] Result not saved: {outcome.save_error}")

        return payload

    except Exception as e:
        print(f"\n[ERROR] Review failed: {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        return None


async def email(
    inputs_path: str,
    output_dir: str = "outputs",
    model: str | None = None,
    verbose: bool = False,
) -> dict | None:
    """Draft a confirmation email from a JSON inputs file.

    Returns:
        Wire-format EmailGenerationResult dict, or None on failure.
    """
    from reviewer.core.cost_tracker import CostTracker
    from reviewer.core.llm_client import LLMClient
    from reviewer.core.pipeline_logger import PipelineLogger
    from reviewer.email.composer import EmailComposer
    from reviewer.pydantic_models.email_models import EmailGenerationInputs

    inputs_path = Path(inputs_path)
    if not inputs_path.exists():
        print(f"Error: File not found: {inputs_path}")
        return None
    if not _check_api_key():
        return None

    try:
        with open(inputs_path, encoding="utf-8") as f:
            inputs = EmailGenerationInputs.model_validate(json.load(f))

        cost_tracker = CostTracker()
        composer = EmailComposer(
            LLMClient(cost_tracker=cost_tracker),
            model=model or DEFAULT_MODELS["email"],
            logger=PipelineLogger(verbose=verbose),
        )
        result = await composer.generate(inputs)
        payload = result.to_wire()

        output_file = _write_json(Path(output_dir) / "emails" / f"{inputs_path.stem}_email.json", payload)
        print(f"\n[OUTPUT] {output_file}")
        for flag in result.flags:
            print(f"  [{flag.type.upper()}] {flag.message}")
        if cost_tracker.call_count:
            print(f"  Cost: ${cost_tracker.total_cost:.4f}")

        return payload

    except Exception as e:
        print(f"\n[ERROR] Email drafting failed: {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        return None


def main():
    parser = argparse.ArgumentParser(
        description="Subscription Document Review Pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run review analyze docs/sub_doc.pdf                          # local rules only
  uv run review analyze -m external_ai --include-rules docs/sub_doc.pdf
  uv run review analyze -m company_llm --screenshots --save docs/sub_doc.pdf
  uv run review email inputs/acme_email.json
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output with DEBUG level logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Review a PDF for issues")
    analyze_parser.add_argument("pdf", help="Path to PDF file")
    analyze_parser.add_argument(
        "-m", "--method",
        choices=PROCESSING_METHODS,
        default="local_patterns",
        help="Processing method (default: local_patterns)",
    )
    analyze_parser.add_argument(
        "-o", "--output",
        default="outputs",
        help="Output directory (default: outputs)",
    )
    analyze_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=(
            "Model override, any model of the configured provider (e.g. openrouter/anthropic/claude-3.5-sonnet). "
            f"Defaults: company_llm={DEFAULT_MODELS['company_llm']}, "
            f"external_ai={DEFAULT_MODELS['external_ai']}"
        ),
    )
    analyze_parser.add_argument(
        "--include-rules",
        action="store_true",
        help="Run rule detectors alongside the model and merge their issues",
    )
    analyze_parser.add_argument(
        "--no-sanitize",
        action="store_true",
        help="Do not redact sensitive values before calling the company model",
    )
    analyze_parser.add_argument(
        "--disable-rule",
        action="append",
        default=[],
        metavar="RULE_ID",
        help="Switch off a pattern rule (repeatable, local_patterns only)",
    )
    analyze_parser.add_argument(
        "--screenshots",
        action="store_true",
        help="Attach a rendered page image to every issue",
    )
    analyze_parser.add_argument(
        "--save",
        action="store_true",
        help="Persist the result under <output>/results",
    )

    email_parser = subparsers.add_parser("email", help="Draft a confirmation email")
    email_parser.add_argument("inputs", help="Path to email inputs JSON")
    email_parser.add_argument(
        "-o", "--output",
        default="outputs",
        help="Output directory (default: outputs)",
    )
    email_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"Model for drafting. Default: {DEFAULT_MODELS['email']}",
    )

    args = parser.parse_args()

    if args.command == "analyze":
        result = asyncio.run(analyze(
            pdf_path=args.pdf,
            method=args.method,
            output_dir=args.output,
            model=args.model,
            include_rules=args.include_rules,
            no_sanitize=args.no_sanitize,
            disabled_rules=args.disable_rule,
            screenshots=args.screenshots,
            save=args.save,
            verbose=args.verbose,
        ))
    else:
        result = asyncio.run(email(
            inputs_path=args.inputs,
            output_dir=args.output,
            model=args.model,
            verbose=args.verbose,
        ))

    sys.exit(0 if result else 1)


if __name__ == "__main__":
    main()
