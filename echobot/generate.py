#!/usr/bin/env python
"""
Send a single prompt to the generative text API and print the answer.

Usage:
  echobot-generate "Write a haiku about tea"
  echobot-generate --model gpt-4o --temperature 0.2 "Summarise HTTP/2"
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from echobot.constants import DEFAULT_PROMPT
from echobot.services.genai.openai_service import AsyncOpenAIService


def setup_arg_parser():
    parser = argparse.ArgumentParser(
        description="Generate text from a single prompt"
    )
    parser.add_argument(
        "prompt", nargs="?", default=DEFAULT_PROMPT, help="Prompt to send"
    )
    parser.add_argument("--model", help="Model name (defaults to OPENAI_MODEL)")
    parser.add_argument("--system", help="Optional system prompt")
    parser.add_argument("--temperature", type=float, help="Sampling temperature")
    parser.add_argument(
        "--max-tokens", type=int, help="Maximum number of tokens to generate"
    )
    return parser


async def generate(args: argparse.Namespace, service: AsyncOpenAIService) -> Optional[str]:
    options = {}
    if args.temperature is not None:
        options["temperature"] = args.temperature
    if args.max_tokens is not None:
        options["max_tokens"] = args.max_tokens

    return await service.generate_text(
        args.prompt, model=args.model, system_prompt=args.system, **options
    )


def main(argv: Optional[List[str]] = None, service: Optional[AsyncOpenAIService] = None) -> int:
    args = setup_arg_parser().parse_args(argv)

    if service is None:
        try:
            service = AsyncOpenAIService()
        except ValueError as e:
            print(f"Error: {e} Set OPENAI_API_KEY.", file=sys.stderr)
            return 1

    text = asyncio.run(generate(args, service))
    if text is None:
        print("Error: no response from the model", file=sys.stderr)
        return 1

    print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
