"""Shell integration printed by `work-keeper --shell-init`.

The Python process cannot change its parent shell's directory, so `work` is
a shell function: it points WORK_CD_FILE at a temp file, runs the real
command, and cds to whatever path the command left there.
"""

SHELL_WRAPPER_BASH = r'''# worktree-keeper shell integration
# Add to ~/.bashrc:  eval "$(work-keeper --shell-init bash)"
work() {
    local cd_file
    cd_file="$(mktemp "${TMPDIR:-/tmp}/work-cd.XXXXXX")" || return 1
    WORK_CD_FILE="$cd_file" command "${WORK_BIN:-work-keeper}" "$@"
    local rc=$?
    if [ -s "$cd_file" ]; then
        local target
        target="$(cat "$cd_file")"
        [ -d "$target" ] && cd "$target"
    fi
    rm -f "$cd_file"
    return $rc
}
'''

SHELL_WRAPPER_ZSH = r'''# worktree-keeper shell integration
# Add to ~/.zshrc:  eval "$(work-keeper --shell-init zsh)"
work() {
    local cd_file
    cd_file="$(mktemp "${TMPDIR:-/tmp}/work-cd.XXXXXX")" || return 1
    WORK_CD_FILE="$cd_file" command "${WORK_BIN:-work-keeper}" "$@"
    local rc=$?
    if [[ -s "$cd_file" ]]; then
        local target="$(<"$cd_file")"
        [[ -d "$target" ]] && cd "$target"
    fi
    rm -f "$cd_file"
    return $rc
}

_work() {
    local -a commands
    commands=(
        'ls:list worktrees of the current project'
        'rm:remove a worktree'
        'prune:remove worktrees whose branch is gone from the remote'
        'add:register a project'
    )
    _describe 'command' commands
}
compdef _work work 2>/dev/null
'''

SHELL_WRAPPERS = {
    "bash": SHELL_WRAPPER_BASH,
    "zsh": SHELL_WRAPPER_ZSH,
}


def shell_init(shell: str) -> str:
    """Wrapper source for shell ("bash" or "zsh")."""
    try:
        return SHELL_WRAPPERS[shell]
    except KeyError:
        raise ValueError(f"Unsupported shell: {shell}")
