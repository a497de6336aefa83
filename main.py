from enum import Enum

from rich.console import Console
from rich.pretty import pprint

from verbum import *


class PullPolicy(Enum):
    ALWAYS = "Always"
    MISSING = "Missing"
    NEVER = "Never"


@verb("build", help="Build an image from a Dockerfile")
class Build(DefaultSetter):
    tags = Option(Kind.LIST_OF_STRING, "-t", "--tag", help="Name and optionally tag in name:tag format")
    dockerfile = Option(Kind.STRING, "-f", "--file", path=PathType.FILE, help="Name of the Dockerfile")
    pull = Option(Kind.NULLABLE_ENUM, choices=PullPolicy, default=PullPolicy.MISSING)
    no_cache = Option(Kind.BOOLEAN, help="Do not use cache when building")
    context = Option(Kind.STRING, default=".", path=PathType.DIRECTORY)

    def update_defaults(self):
        self.context = self.context or "."


if __name__ == '__main__':
    registry = Registry(Build)
    build = apply_defaults(Build.__verb__.new(tags=["app:latest", "app:v1"], no_cache=True))

    pprint(Build.__verb__)
    console = Console()
    console.print(Build.__verb__)
    console.print(build_command(build), markup=False)
    console.print(build_command(build, True), markup=False)
    pprint(Build.__verb__.snapshot(registry.parse(build_command(build, True))))
    report(validate(registry))
