"""
Prompt Management Service.

Centralizes all prompts in YAML files for easy management and updates. Each
file carries the system prompt, an optional human prompt template, the
sampling temperature and the fixed fallback text used when generation fails.
"""
import os
import yaml
from typing import Optional, Dict, Any
from functools import lru_cache

# Path to prompts directory
PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "..", "prompts")


@lru_cache(maxsize=50)
def _load_prompt_file(name: str) -> Optional[Dict[str, Any]]:
    """Load a prompt from YAML file with caching."""
    file_path = os.path.join(PROMPTS_DIR, f"{name}.yaml")
    
    if not os.path.exists(file_path):
        print(f"⚠️ Prompt file not found: {file_path}")
        return None
    
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except Exception as e:
        print(f"❌ Error loading prompt {name}: {e}")
        return None


def _render(template: str, variables: Dict[str, Any]) -> str:
    if not variables or not template:
        return template
    try:
        return template.format(**variables)
    except KeyError:
        return template  # Keep original if variable not provided


def get_prompt(name: str, **kwargs) -> Dict[str, Any]:
    """
    Get a prompt by name.
    
    Args:
        name: Name of the prompt (without .yaml extension)
        **kwargs: Variables to interpolate into the prompt
        
    Returns:
        Dict with 'system_prompt', 'human_prompt', 'temperature' and 'fallback'
    """
    prompt_data = _load_prompt_file(name) or {}
    
    return {
        "system_prompt": _render(prompt_data.get("system_prompt", ""), kwargs).strip(),
        "human_prompt": _render(prompt_data.get("human_prompt", ""), kwargs).strip(),
        "temperature": float(prompt_data.get("temperature", 0.7)),
        "fallback": prompt_data.get("fallback", ""),
    }


def get_fallback(name: str) -> str:
    """Convenience function to get only the fallback text."""
    return get_prompt(name).get("fallback", "")


def clear_cache():
    """Clear the prompt cache (useful after updating YAML files)."""
    _load_prompt_file.cache_clear()
