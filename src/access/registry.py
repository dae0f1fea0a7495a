"""Access Control Registry — иерархия ролей ledger.

Иерархия (genesis):
- ADMIN — корень, admin для самого себя
- ADMIN администрирует GUARDIAN
- GUARDIAN администрирует DATA и OPS

Admin-роль определяет, кто может выдавать и отзывать роль. Deployer (root)
получает ADMIN и GUARDIAN при создании реестра. set_role_admin доступен
только root и только до finish_setup().

Компонент-лист: не зависит от ledger, внедряется в LedgerEngine как
capability-проверка (has_role / require_role).
"""

import logging
import threading
from enum import Enum
from typing import Dict, Mapping, Optional, Set, Tuple

from src.core.errors import Unauthorized

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Роли ledger."""

    ADMIN = "ADMIN"
    GUARDIAN = "GUARDIAN"
    DATA = "DATA"
    OPS = "OPS"


# role → admin role
DEFAULT_ROLE_ADMINS: Mapping[Role, Role] = {
    Role.ADMIN: Role.ADMIN,
    Role.GUARDIAN: Role.ADMIN,
    Role.DATA: Role.GUARDIAN,
    Role.OPS: Role.GUARDIAN,
}


class AccessControlRegistry:
    """Реестр членства в ролях.

    Все мутации сериализованы внутренним lock. Повторная выдача уже имеющейся
    роли и отзыв отсутствующей — no-op (возвращают False).
    Self-revoke разрешён, если вызывающий держит admin-роль.
    """

    def __init__(
        self,
        root: str,
        role_admins: Optional[Mapping[Role, Role]] = None,
    ):
        """
        Args:
            root: principal deployer'а (получает ADMIN и GUARDIAN)
            role_admins: переопределения иерархии поверх DEFAULT_ROLE_ADMINS
        """
        if not root:
            raise ValueError("root principal must be non-empty")

        self._root = root
        self._role_admins: Dict[Role, Role] = dict(DEFAULT_ROLE_ADMINS)
        if role_admins:
            self._role_admins.update(role_admins)
        self._members: Dict[Role, Set[str]] = {role: set() for role in Role}
        self._setup_open = True
        self._lock = threading.Lock()

        self._members[Role.ADMIN].add(root)
        self._members[Role.GUARDIAN].add(root)
        logger.info(f"Access registry genesis: root={root} granted ADMIN, GUARDIAN")

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def root(self) -> str:
        return self._root

    @property
    def setup_open(self) -> bool:
        return self._setup_open

    def has_role(self, role: Role, principal: str) -> bool:
        return principal in self._members[Role(role)]

    def get_role_admin(self, role: Role) -> Role:
        return self._role_admins[Role(role)]

    def members(self, role: Role) -> Tuple[str, ...]:
        """Члены роли (отсортированы для детерминизма)."""
        return tuple(sorted(self._members[Role(role)]))

    def require_role(self, role: Role, principal: str, action: str = "") -> None:
        """Capability-проверка для ledger.

        Raises:
            Unauthorized: principal не держит role
        """
        if not self.has_role(role, principal):
            logger.warning(
                f"Unauthorized: {principal} lacks {Role(role).value}"
                + (f" for {action}" if action else "")
            )
            raise Unauthorized(Role(role), principal, action)

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def grant_role(self, role: Role, principal: str, caller: str) -> bool:
        """Выдача роли. Caller должен держать admin-роль для role.

        Returns:
            True если членство изменилось

        Raises:
            Unauthorized: caller не держит admin-роль
        """
        role = Role(role)
        with self._lock:
            self.require_role(self._role_admins[role], caller, action=f"grant {role.value}")
            if principal in self._members[role]:
                return False
            self._members[role].add(principal)
        logger.info(f"Role granted: {role.value} → {principal} (by {caller})")
        return True

    def revoke_role(self, role: Role, principal: str, caller: str) -> bool:
        """Отзыв роли. Caller должен держать admin-роль для role.

        Returns:
            True если членство изменилось

        Raises:
            Unauthorized: caller не держит admin-роль
        """
        role = Role(role)
        with self._lock:
            self.require_role(self._role_admins[role], caller, action=f"revoke {role.value}")
            if principal not in self._members[role]:
                return False
            self._members[role].discard(principal)
        logger.info(f"Role revoked: {role.value} ✗ {principal} (by {caller})")
        return True

    def renounce_role(self, role: Role, caller: str) -> bool:
        """Добровольный отказ от собственной роли (без admin-роли)."""
        role = Role(role)
        with self._lock:
            if caller not in self._members[role]:
                return False
            self._members[role].discard(caller)
        logger.info(f"Role renounced: {role.value} ✗ {caller}")
        return True

    def set_role_admin(self, role: Role, admin_role: Role, caller: str) -> None:
        """Смена admin-роли. Только root и только в фазе setup.

        Raises:
            Unauthorized: caller не root или setup уже закрыт
        """
        role, admin_role = Role(role), Role(admin_role)
        with self._lock:
            if caller != self._root or not self._setup_open:
                logger.warning(
                    f"Unauthorized: set_role_admin({role.value}) by {caller}, "
                    f"setup_open={self._setup_open}"
                )
                raise Unauthorized(Role.ADMIN, caller, action="set_role_admin")
            previous = self._role_admins[role]
            self._role_admins[role] = admin_role
        logger.info(f"Role admin changed: {role.value} admin {previous.value} → {admin_role.value}")

    def finish_setup(self, caller: str) -> None:
        """Закрытие фазы setup: дальнейшие set_role_admin запрещены."""
        with self._lock:
            if caller != self._root:
                raise Unauthorized(Role.ADMIN, caller, action="finish_setup")
            self._setup_open = False
        logger.info("Access registry setup closed")
