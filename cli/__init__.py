# cli - Click 진입점과 콘솔 출력
