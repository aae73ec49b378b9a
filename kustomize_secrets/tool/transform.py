"""kustomize-secrets transform action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

import aiofiles

from kustomize_secrets.config import TransformerConfig
from kustomize_secrets.exceptions import InputException
from kustomize_secrets.mutator import StaticResolver
from kustomize_secrets.resource import dump_resources, parse_resources
from kustomize_secrets.transformer import SecretTransformer

_LOGGER = logging.getLogger(__name__)


async def _read_file(path: str | pathlib.Path) -> str:
    """Return the contents of an input file."""
    try:
        async with aiofiles.open(str(path)) as input_file:
            return await input_file.read()
    except OSError as err:
        raise InputException(f"Unable to read {path}: {err}") from err


class TransformAction:
    """kustomize-secrets transform action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "transform",
                help="Inject secret values into the workloads of a resource stream",
                description="""Reads a stream of kubernetes objects, replaces
                    secret references in the containers of each workload and
                    writes the resulting stream. This behaves like a kustomize
                    exec transformer plugin.""",
            ),
        )
        args.add_argument(
            "config",
            type=pathlib.Path,
            help="Path to the transformer plugin config file",
        )
        args.add_argument(
            "--values",
            type=pathlib.Path,
            default=None,
            help="YAML file mapping secret references to their values",
        )
        args.add_argument(
            "--input-file",
            type=str,
            default="/dev/stdin",
            help="Input file with the objects to transform",
        )
        args.add_argument(
            "--output-file",
            type=str,
            default="/dev/stdout",
            help="Output file for the results of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        config: pathlib.Path,
        values: pathlib.Path | None,
        input_file: str,
        output_file: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        transformer_config = TransformerConfig.parse_yaml(await _read_file(config))
        resolver = StaticResolver({})
        if values is not None:
            resolver = StaticResolver.parse_yaml(await _read_file(values))
        resources = parse_resources(await _read_file(input_file))
        _LOGGER.debug("Read %d objects from %s", len(resources), input_file)

        SecretTransformer(transformer_config, resolver).transform(resources)

        async with aiofiles.open(output_file, mode="w") as output:
            await output.write(dump_resources(resources))
