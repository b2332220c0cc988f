"""Domain error taxonomy and the user-facing (Japanese) messages for it.

Every error a caller may see carries a stable ``code``. Routers never build
messages themselves: the exception handlers in ``app.main`` call
:func:`user_message` so that unknown codes fall back to a message for the
operation that failed.
"""

# code -> message shown to staff
_MESSAGES: dict[str, str] = {
    "permission-denied": "アクセス権限がありません",
    "not-found": "データが見つかりません",
    "already-exists": "データが既に存在します",
    "resource-exhausted": "システムが混雑しています。しばらく待ってから再試行してください",
    "deadline-exceeded": "タイムアウトしました。ネットワーク接続を確認してください",
    "unavailable": "サービスが一時的に利用できません",
    "invalid-argument": "入力内容に誤りがあります",
    "unauthenticated": "認証が必要です。再度ログインしてください",
}

_OPERATION_FALLBACKS: dict[str, str] = {
    "create": "登録に失敗しました",
    "update": "更新に失敗しました",
    "delete": "削除に失敗しました",
    "read": "データの取得に失敗しました",
}

def user_message(code: str | None, operation: str | None = None) -> str:
    if code and code in _MESSAGES:
        return _MESSAGES[code]
    return _OPERATION_FALLBACKS.get(operation or "", "操作に失敗しました")


class DomainError(Exception):
    code = "unknown"
    status_code = 500

    def __init__(self, message: str | None = None, *, operation: str | None = None):
        self.operation = operation
        self.message = message or user_message(self.code, operation)
        super().__init__(self.message)


class InvalidInputError(DomainError):
    code = "invalid-argument"
    status_code = 400


class ConflictError(DomainError):
    code = "already-exists"
    status_code = 409


class NotFoundError(DomainError):
    code = "not-found"
    status_code = 404


class AuthorizationError(DomainError):
    code = "permission-denied"
    status_code = 403


class UnavailableError(DomainError):
    code = "unavailable"
    status_code = 503


class DeadlineExceededError(UnavailableError):
    code = "deadline-exceeded"


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status_code = 401
