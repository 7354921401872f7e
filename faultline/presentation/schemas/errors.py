"""エラーレスポンスのスキーマ定義"""

from typing import Optional

from pydantic import BaseModel


class TraceFrame(BaseModel):
    """
    スタックトレースの1フレーム

    Attributes:
        file: ファイルパス
        line: 行番号
        function: 関数名
        source: 該当行のソースコード（取得できない場合None）
    """

    file: str
    line: Optional[int] = None
    function: str
    source: Optional[str] = None


class ApiErrorResponse(BaseModel):
    """
    API/CLI/テスト向けのエラーレスポンス

    Attributes:
        code: エラーコード
        message: エラーメッセージ
        trace: スタックトレース（本番環境では常に空）
    """

    code: int
    message: str
    trace: list[TraceFrame] = []
