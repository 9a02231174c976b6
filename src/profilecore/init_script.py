"""Shell code printed by ``profilecore init <shell>``.

The installed hook evals this at start-up. Keep it small: aliases for
the everyday commands plus click's on-demand tab completion.
"""

from __future__ import annotations

from . import BINARY_NAME, __version__
from .shells import ShellDialect, SyntaxFamily, parse_shell, spec_for

COMPLETE_VAR = f"_{BINARY_NAME.upper()}_COMPLETE"

_POSIX_TEMPLATE = """\
# ProfileCore v{version} - {name} integration

alias pcdoctor='{binary} doctor'
alias pcreload='{reload}'

# Tab completion
eval "$({var}={complete}_source {binary})"
"""

_FISH_TEMPLATE = """\
# ProfileCore v{version} - Fish integration

alias pcdoctor '{binary} doctor'
alias pcreload '{reload}'

# Tab completion
{var}=fish_source {binary} | source
"""

_POWERSHELL_TEMPLATE = """\
# ProfileCore v{version} - PowerShell integration

function pcdoctor {{ {binary} doctor @args }}
function pcreload {{ . $PROFILE }}
"""


def generate_init_script(dialect: ShellDialect) -> str:
    """Integration script for a dialect.

    Args:
        dialect: Target shell.

    Returns:
        Shell source text.
    """
    spec = spec_for(dialect)
    fields = dict(
        version=__version__,
        name=spec.display_name,
        binary=BINARY_NAME,
        reload=spec_for(parse_shell(spec.init_name)).reload_command,
        var=COMPLETE_VAR,
        complete=spec.init_name,
    )
    if spec.family == SyntaxFamily.POSIX:
        return _POSIX_TEMPLATE.format(**fields)
    if spec.family == SyntaxFamily.FISH:
        return _FISH_TEMPLATE.format(**fields)
    return _POWERSHELL_TEMPLATE.format(**fields)
