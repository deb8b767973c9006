from pathlib import Path

import click

from aclprop.__about__ import __version__
from aclprop.commands import load_config, propagate_acls
from aclprop.helpers.handle_errors import handle_errors


class AclPropCommand(click.Command):
    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # Every validation failure exits 1, argument count included
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(
    cls=AclPropCommand,
    epilog="Sets rX on every directory from ROOT_PATH down to the parent of TARGET_PATH, then applies the ACL "
    "recursively (access and default) to TARGET_PATH. Without ACL_FILE, the user or group and the permissions are "
    "prompted for.",
)
@click.argument("root_path", type=click.Path(path_type=Path))
@click.argument("target_path", type=click.Path(path_type=Path))
@click.argument("acl_file", type=click.Path(path_type=Path), required=False)
@click.option("--dry-run", help="Print the ACL changes without applying them", is_flag=True, default=False)
@click.option("-c", "--config", "config_file", type=click.Path(path_type=Path), help="Path to a config.toml file")
@click.version_option(__version__, prog_name="aclprop")
@handle_errors
def main(root_path: Path, target_path: Path, acl_file: Path | None, dry_run: bool, config_file: Path | None):
    """Propagate POSIX ACLs from TARGET_PATH up to ROOT_PATH and down into TARGET_PATH."""
    propagate_acls(root_path, target_path, acl_file, config=load_config(config_file), dry_run=dry_run)


if __name__ == "__main__":
    main()
