import click


@click.group()
@click.option("--log-level", default=None, help="Log level (default: from SSHDRIVER_LOG_LEVEL or INFO).")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """sshdriver - drive test instances over SSH."""
    from sshdriver.lifecycle.log import setup_logging
    from sshdriver.lifecycle.settings import get_settings

    settings = get_settings()
    setup_logging(log_level or settings.log_level)
    ctx.obj = settings


def _connection_options(func):
    func = click.option("--hostname", required=True, help="Instance hostname or IP.")(func)
    func = click.option("--username", default=None, help="Remote user (default: SSHDRIVER_USERNAME).")(func)
    func = click.option("--port", default=None, type=int, help="SSH port (default: SSHDRIVER_PORT or 22).")(func)
    func = click.option("--ssh-key", "ssh_keys", multiple=True, help="Private key file; repeatable.")(func)
    return func


def _state(hostname: str, username: str | None, port: int | None, ssh_keys: tuple[str, ...]) -> dict:
    state: dict = {"hostname": hostname}
    if username:
        state["username"] = username
    if port:
        state["port"] = port
    if ssh_keys:
        state["ssh_key"] = list(ssh_keys)
    return state


def _driver(settings):
    from sshdriver.lifecycle.driver import SSHBase
    from sshdriver.lifecycle.instance import Instance

    return SSHBase(Instance(name="cli"), settings)


@main.command()
@_connection_options
@click.pass_obj
def login(settings, hostname: str, username: str | None, port: int | None, ssh_keys: tuple[str, ...]) -> None:
    """Print the interactive ssh login command for an instance."""
    cmd = _driver(settings).login_command(_state(hostname, username, port, ssh_keys))
    click.echo(str(cmd))


@main.command(name="exec")
@_connection_options
@click.argument("command")
@click.pass_obj
def exec_(
    settings,
    hostname: str,
    username: str | None,
    port: int | None,
    ssh_keys: tuple[str, ...],
    command: str,
) -> None:
    """Run COMMAND on an instance."""
    from sshdriver.lifecycle.errors import ActionFailed

    try:
        _driver(settings).remote_command(_state(hostname, username, port, ssh_keys), command)
    except ActionFailed as e:
        raise click.ClickException(str(e)) from e


@main.command()
@_connection_options
@click.option("--retries", default=30, type=int, help="Connection attempts before giving up.")
@click.option("--delay", default=2.0, type=float, help="Seconds between attempts.")
@click.pass_obj
def wait(
    settings,
    hostname: str,
    username: str | None,
    port: int | None,
    ssh_keys: tuple[str, ...],
    retries: int,
    delay: float,
) -> None:
    """Block until an instance accepts SSH logins."""
    from sshdriver.lifecycle.errors import SSHFailed
    from sshdriver.lifecycle.execution.resolver import build_connection

    conn = build_connection(settings.to_config(), _state(hostname, username, port, ssh_keys))
    options = {**conn.options, "ssh_retries": retries, "ssh_retry_delay": delay}
    try:
        _driver(settings).wait_for_sshd(conn.host, conn.user, options)
    except SSHFailed as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"{hostname} is ready.")


if __name__ == "__main__":
    main()
