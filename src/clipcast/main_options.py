"""Click option helpers for mutual exclusivity."""
import click


def _check_mutual_exclusion(
    ctx: click.Context, option: click.Option, others: list[str], opts: dict
) -> None:
    """Raise UsageError if option was given together with one of others.

    Args:
        ctx: The click context, used to look up the other parameters.
        option: The option being processed.
        others: Names of parameters that cannot be combined with option.
        opts: Dictionary of parsed parameters.

    Raises:
        click.UsageError: If option and another listed parameter are present.
    """
    for other in others:
        if other not in opts:
            continue
        label = other
        for param in ctx.command.params:
            if param.name == other:
                label = param.human_readable_name
        msg = f"{option.opts[0]} and {label} are mutually exclusive"
        raise click.UsageError(msg, ctx=ctx)


class MutuallyExclusiveOption(click.Option):
    """Click option that cannot be combined with other parameters."""

    def __init__(self, *args, **kwargs):
        """Initialize with mutually_exclusive, a list of parameter names."""
        self.mutually_exclusive = kwargs.pop("mutually_exclusive", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Check mutual exclusion before the value is processed."""
        if self.name in opts:
            _check_mutual_exclusion(ctx, self, self.mutually_exclusive, opts)
        return super().handle_parse_result(ctx, opts, args)
