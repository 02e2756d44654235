from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class Tool(Protocol):
    """Protocol that all analysis tools must implement"""
    name: str
    description: str

    async def analyze(self, input_path: str, output_video_path: Optional[str] = None) -> Dict[str, Any]:
        """Perform analysis on the input and return structured data"""
        ...
