"""
Alias Resolver

Maps raw technology terms to canonical names using the tables in
SkillsConfig. It is a pure function of those tables:

- short-form expansion ("js" -> "javascript")
- alias -> canonical skill name ("reactjs" -> "React")
- file extension -> technology (".tsx" -> "TypeScript")
- special file name -> technology ("Cargo.toml" -> "Rust")
- skill hierarchy ("React Native" implies "React")

Usage:
    resolver = AliasResolver(load_skills_config())
    resolver.resolve("reactjs")          # "React"
    resolver.are_aliases("C#", "csharp") # True
"""

from pathlib import PurePosixPath
from typing import Dict, List, Optional, Set, Tuple

from src.common.skills_config import SkillsConfig
from src.common.string_utils import normalize_term


class AliasResolver:
    """Term normalization driven entirely by configuration tables."""

    def __init__(self, config: SkillsConfig):
        self.config = config

        # alias (lowercase) -> canonical skill name; canonical names map to themselves
        self._alias_to_skill: Dict[str, str] = {}
        for canonical, aliases in config.skill_aliases.items():
            for alias in aliases:
                self._alias_to_skill.setdefault(alias.lower(), canonical)
        for canonical in config.skill_aliases:
            self._alias_to_skill[canonical.lower()] = canonical

        # Normalized alias groups used by are_aliases()
        self._alias_groups: List[Set[str]] = []
        for table in (config.language_aliases, config.skill_aliases):
            for canonical, aliases in table.items():
                self._alias_groups.append({normalize_term(t) for t in [canonical, *aliases]})

        self._extension_to_tech = {ext.lower(): tech for ext, tech in config.extension_to_tech.items()}
        self._special_files = [(pattern.lower(), tech) for pattern, tech in config.special_files.items()]
        self._hierarchy = {name.lower(): entry for name, entry in config.skill_hierarchy.items()}

    # ===== Single-table lookups =====

    def expand_short_term(self, term: str) -> str:
        """Expand a short form ("ts" -> "typescript"); other terms come back unchanged."""
        return self.config.short_term_expansions.get(term.lower(), term)

    def resolve_alias(self, term: str) -> Optional[str]:
        """Canonical skill name for an alias, or None if the term is not in the table."""
        return self._alias_to_skill.get(term.lower())

    def tech_for_extension(self, path: str) -> Optional[str]:
        suffix = PurePosixPath(path).suffix.lower()
        if not suffix:
            return None
        return self._extension_to_tech.get(suffix)

    def techs_for_special_file(self, path: str) -> List[str]:
        """Technologies whose special-file pattern occurs in the path."""
        path_lower = path.lower()
        techs = []
        for pattern, tech in self._special_files:
            if pattern in path_lower and tech not in techs:
                techs.append(tech)
        return techs

    def techs_for_file(self, path: str) -> List[str]:
        """Extension technology followed by special-file technologies, deduplicated."""
        techs = []
        tech = self.tech_for_extension(path)
        if tech:
            techs.append(tech)
        for special in self.techs_for_special_file(path):
            if special not in techs:
                techs.append(special)
        return techs

    # ===== Combined resolution =====

    def resolve(self, term: str) -> str:
        """
        Canonical form of a raw term.

        Tries, in order: short form, alias table, file extension, special
        file name. A term with no table entry is returned unchanged, and a
        canonical name resolves to itself.

        SkillMatcher does not call this. Its terms are already technology
        names (the extractor maps files to technologies), so it applies only
        the short-form and alias steps. Extension and special-file lookups
        here are for callers holding raw file names.
        """
        expanded = self.expand_short_term(term)
        if expanded != term:
            return self.resolve_alias(expanded) or expanded

        canonical = self.resolve_alias(term)
        if canonical:
            return canonical

        # Bare extensions only; "three.js" is a library, not a .js file
        tech = self._extension_to_tech.get(term.lower())
        if tech:
            return tech

        special = self.techs_for_special_file(term)
        if special:
            return special[0]

        return term

    def are_aliases(self, term1: str, term2: str) -> bool:
        """
        True if the two terms name the same technology.

        Terms are compared after lowercasing and dropping dots, whitespace and
        hyphens ("React.js" == "reactjs"), then checked against alias groups.
        """
        t1 = normalize_term(term1)
        t2 = normalize_term(term2)
        if not t1 or not t2:
            return False
        if t1 == t2:
            return True
        return any(t1 in group and t2 in group for group in self._alias_groups)

    def extensions_for(self, term: str) -> List[str]:
        """File extensions whose technology is this term or one of its aliases."""
        return [ext for ext, tech in self._extension_to_tech.items() if self.are_aliases(tech, term)]

    def implied_skills(self, skill_name: str) -> List[Tuple[str, float]]:
        """(implied skill name, weight) pairs from the skill hierarchy."""
        entry = self._hierarchy.get(skill_name.lower())
        if not entry:
            return []
        return [(implied, entry.weight) for implied in entry.implies]
