"""例外定義

ValidationError は入力値の不正（範囲外の座標・半径など）、
InfrastructureError はDB・外部APIの障害を表す。
チェックインの距離超過は例外ではなく checkin_gate.Rejected で返す。
"""


class KissaError(Exception):
    """アプリケーション例外の基底クラス"""


class ValidationError(KissaError, ValueError):
    """入力値が不正"""


class InfrastructureError(KissaError):
    """リポジトリ・外部サービスの障害"""


class RepositoryError(InfrastructureError):
    """DBアクセス失敗"""


class GeocodingError(InfrastructureError):
    """ジオコーディングAPI呼び出し失敗"""
