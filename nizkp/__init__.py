"""
MiMC preimage 지식 증명: bulletproof, Groth16, STARK 비교
==========================================================

같은 MiMC 라운드 순열을 세 가지 증명 체계의 제약 형식으로 표현하고,
증명 크기, 시간, 보안 수준을 측정한다.

  nizkp.mimc          참조 순열과 세 가지 인코딩 (가젯, 회로, AIR)
  nizkp.bulletproof   R1CS bulletproof (Pedersen 커밋먼트 + 내적 인자)
  nizkp.groth16       Groth16 (회로 합성, CRS 생성, 증명, 검증)
  nizkp.stark         STARK (trace, AIR, FRI)
  nizkp.bench         벤치마크 하니스
"""

__version__ = "0.1.0"
