from invoke import task


@task
def test(ctx):
    ctx.run("pytest --cov=symlinkmirror --cov-report=term-missing --cov-fail-under=80", echo=True)


@task
def validate(ctx):
    """validate"""
    ctx.run("pyflakes ./src ./tests", echo=True)
    ctx.run("black --check --diff .", echo=True)

    ctx.run("pylint ./src ./tests", warn=True, echo=True)

    ctx.run("mypy --install-types --non-interactive ./src ./tests", echo=True)


@task
def fmt(ctx):
    ctx.run("black .")


@task
def mirror(ctx, source, destination):
    """Mirror `source` into `destination` from a checkout"""
    ctx.run(f'python -m symlinkmirror "{source}" "{destination}"', echo=True, pty=True)
