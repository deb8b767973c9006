from aclprop.commands.load_config import get_config_paths, load_config
from aclprop.commands.prompt_spec import PermissionPrompt, PromptState, prompt_permission_spec
from aclprop.commands.propagate import propagate_acls
