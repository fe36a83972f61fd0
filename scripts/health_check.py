#!/usr/bin/env python3
"""
Health check script for the Open Congress API and its graph database
"""

import asyncio
import json
import os
import socket
import sys
import time
from datetime import datetime
from typing import Any, Dict, List
from urllib.parse import urlparse

import aiohttp


def bolt_endpoint(uri: str):
    parsed = urlparse(uri)
    return parsed.hostname or "localhost", parsed.port or 7687


class HealthChecker:
    def __init__(self, api_url: str = None, neo4j_uri: str = None):
        api_url = (api_url or os.getenv("API_URL", "http://localhost:8000")).rstrip("/")
        prefix = os.getenv("API_PREFIX", "/api").rstrip("/")
        host, port = bolt_endpoint(neo4j_uri or os.getenv("NEO4J_URI", "bolt://localhost:7687"))
        self.services = {
            'api': {'url': f"{api_url}{prefix}/ping", 'critical': True},
            'neo4j': {'host': host, 'port': port, 'critical': True},
        }

    async def check_http_service(self, service_name: str, url: str) -> Dict[str, Any]:
        """Check health of an HTTP service"""
        start_time = time.time()

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=10)) as session:
                async with session.get(url) as response:
                    body = await response.json(content_type=None)
                    healthy = response.status == 200 and bool(body and body.get('success'))
                    result = {
                        'service': service_name,
                        'status': 'healthy' if healthy else 'unhealthy',
                        'response_time': time.time() - start_time,
                        'status_code': response.status,
                        'url': url,
                    }
                    if not healthy and body and body.get('error'):
                        result['error'] = body['error'].get('message', 'Unknown error')
                    return result
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            return {
                'service': service_name,
                'status': 'error',
                'response_time': time.time() - start_time,
                'error': str(e) or e.__class__.__name__,
                'url': url,
            }

    def check_port_service(self, service_name: str, port: int, host: str = 'localhost') -> Dict[str, Any]:
        """Check if a port-based service is responding"""
        start_time = time.time()

        try:
            with socket.create_connection((host, port), timeout=5):
                status = 'healthy'
        except OSError as e:
            return {
                'service': service_name,
                'status': 'error',
                'response_time': time.time() - start_time,
                'error': str(e),
                'port': port,
                'host': host,
            }

        return {
            'service': service_name,
            'status': status,
            'response_time': time.time() - start_time,
            'port': port,
            'host': host,
        }

    async def check_all_services(self) -> List[Dict[str, Any]]:
        """Check health of all services"""
        http_tasks = [
            self.check_http_service(name, config['url'])
            for name, config in self.services.items()
            if 'url' in config
        ]
        results = list(await asyncio.gather(*http_tasks))

        for name, config in self.services.items():
            if 'port' in config:
                results.append(self.check_port_service(name, config['port'], config['host']))
        return results

    def print_results(self, results: List[Dict[str, Any]]) -> int:
        """Print health check results and return the process exit code"""
        print(f"\n🏥 Open Congress API Health Check")
        print(f"📅 {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("=" * 70)

        critical_healthy = 0
        critical_total = 0
        for result in results:
            is_critical = self.services.get(result['service'], {}).get('critical', False)
            if is_critical:
                critical_total += 1
                if result['status'] == 'healthy':
                    critical_healthy += 1

            status_emoji = "✅" if result['status'] == 'healthy' else "❌" if result['status'] == 'unhealthy' else "⚠️"
            service_name = result['service'].ljust(15)
            status = result['status'].upper().ljust(10)
            response_time = f"{result['response_time']:.2f}s".ljust(8)
            critical_marker = " (CRITICAL)" if is_critical else ""
            print(f"{status_emoji} {service_name} {status} {response_time}{critical_marker}")

            if 'error' in result:
                error_msg = result['error']
                if len(error_msg) > 60:
                    error_msg = error_msg[:60] + "..."
                print(f"   Error: {error_msg}")

        print("\n" + "=" * 70)
        print(f"   Critical: {critical_healthy}/{critical_total} healthy")

        if critical_healthy == critical_total:
            print("🎉 System is healthy!")
            return 0
        print("⚠️  System has issues that need attention")
        return 1


async def main():
    """Main health check function"""
    checker = HealthChecker()

    print("Running health check...")
    results = await checker.check_all_services()
    exit_code = checker.print_results(results)

    if '--json' in sys.argv:
        print(json.dumps({'timestamp': datetime.now().isoformat(), 'services': results}, indent=2))

    sys.exit(exit_code)


if __name__ == "__main__":
    asyncio.run(main())
